import os
from hpln.utils.logger import get_logger, LOG_LEVELS

LOG_LEVEL = LOG_LEVELS.get(os.environ.get("HPLN_LOG_LEVEL", "WARNING").upper(), LOG_LEVELS["WARNING"])
logger = get_logger("hpln", level=LOG_LEVEL)

# Problem-size defaults
DEFAULT_RATIO = 0.8            # mem_fraction = ratio ** 2 = 0.64
DEFAULT_NODE_COUNT = 1
DEFAULT_BLOCK_SIZE = 192
WIDE_VECTOR_BLOCK_SIZE = 384   # used when the CPU advertises WIDE_VECTOR_CPU_FLAG
WIDE_VECTOR_CPU_FLAG = "avx512f"

# Size of one double-precision matrix element
DOUBLE_SIZE_BYTES = 8

# Unit conversions
KIB_PER_GIB = 1024 * 1024
BYTES_PER_KIB = 1024

# Checked in order when -N is not given
NODE_COUNT_ENV_VARS = ("HPL_NODES", "SLURM_JOB_NUM_NODES")

# Platform sources
PROC_MEMINFO = "/proc/meminfo"
PROC_CPUINFO = "/proc/cpuinfo"
