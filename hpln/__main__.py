import sys

from hpln.cli import main

sys.exit(main())
