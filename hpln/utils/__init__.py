"""
hpln utilities package

Logging, subprocess helpers, error reporting and host memory queries.
"""

from hpln.utils.logger import get_logger, set_level, LOG_LEVELS
from hpln.utils.helpers import run_cmd, format_bytes, print_error_and_exit
from hpln.utils.system_info import total_ram, platform_system

__all__ = [
    # logger
    "get_logger",
    "set_level",
    "LOG_LEVELS",
    # helpers
    "run_cmd",
    "format_bytes",
    "print_error_and_exit",
    # system_info
    "total_ram",
    "platform_system",
]
