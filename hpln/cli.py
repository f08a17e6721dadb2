#!/usr/bin/env python3
"""
hpln: HPL problem size calculator

Prints the HPL matrix dimension N that uses a given share of the memory of
one or more nodes, aligned to the block size NB.

Usage:
    # Detect memory on this host, default ratio 0.8 (64% of memory)
    hpln

    # 4 nodes with 256 GiB each, 30% of memory
    hpln -N 4 -m 256 -p 30

    # Explicit block size, show the intermediate values
    hpln -NB 256 -r 0.9 -v
"""

import argparse
import sys
from typing import List, Optional

from hpln.__globals import logger, DEFAULT_RATIO, DEFAULT_BLOCK_SIZE, WIDE_VECTOR_BLOCK_SIZE, WIDE_VECTOR_CPU_FLAG
from hpln.calculator import explain, NCalculation
from hpln.capabilities import get_capability_provider, CapabilityError
from hpln.config import resolve_config, mem_fraction_from_percent, mem_fraction_from_ratio, ConfigurationError
from hpln.utils import format_bytes, print_error_and_exit, set_level, LOG_LEVELS


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

class _MemShareAction(argparse.Action):
    """-p PERCENT: mem_fraction = PERCENT / 100."""

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, ("percent", values))


class _RatioAction(argparse.Action):
    """-r RATIO: mem_fraction = RATIO ** 2."""

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, ("ratio", values))


def mem_fraction_from_share(share) -> Optional[float]:
    """Convert the last -p/-r value seen; earlier ones are never checked."""
    if share is None:
        return None
    kind, value = share
    if kind == "ratio":
        return mem_fraction_from_ratio(value)
    return mem_fraction_from_percent(value)


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        print_error_and_exit(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="hpln",
        description="Compute the HPL problem size N from node memory and a target usage ratio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
-p and -r set the same value; the one given last wins and is the only one checked.

Examples:
  hpln                       # detect memory, ratio {DEFAULT_RATIO}
  hpln -N 4 -m 256 -p 30     # 4 nodes x 256 GiB, 30% of memory
  hpln -NB 256 -r 0.9 -v     # block size 256, show intermediate values
        """,
    )

    parser.add_argument(
        "-m", "--mem", "--ramsize", dest="ram_per_node_gib", type=float, default=None, metavar="GiB",
        help="Memory per node in GiB (detected if omitted)",
    )
    parser.add_argument(
        "-N", "--nodes", dest="node_count", type=int, default=None, metavar="N",
        help="Number of nodes (default: $HPL_NODES, $SLURM_JOB_NUM_NODES or 1)",
    )
    parser.add_argument(
        "-NB", "-b", "--block", "--blocksize", "--block-size", dest="block_size", type=int, default=None,
        metavar="NB",
        help=f"Block size (default: {DEFAULT_BLOCK_SIZE}, {WIDE_VECTOR_BLOCK_SIZE} with {WIDE_VECTOR_CPU_FLAG})",
    )
    parser.add_argument(
        "-p", "--memshare", dest="mem_share", type=float, default=None, action=_MemShareAction,
        metavar="PERCENT",
        help="Share of total memory to use, in percent",
    )
    parser.add_argument(
        "-r", "--ratio", dest="mem_share", type=float, default=None, action=_RatioAction,
        metavar="RATIO",
        help=f"Ratio in (0, 1]; memory share is RATIO squared (default: {DEFAULT_RATIO})",
    )
    parser.add_argument(
        "-v", "--debug", dest="verbose", action="store_true",
        help="Print intermediate values",
    )
    return parser


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def print_report(calc: NCalculation):
    ram_bytes = calc.ram_per_node_kib * 1024
    print("=" * 50)
    print("HPL PROBLEM SIZE")
    print("=" * 50)
    print(f"Nodes:            {calc.node_count}")
    print(f"Memory per node:  {calc.ram_per_node_kib:.0f} KiB ({format_bytes(ram_bytes)})")
    print(f"Memory fraction:  {calc.mem_fraction:g}")
    print(f"Block size (NB):  {calc.block_size}")
    print(f"Total memory:     {calc.total_memory_bytes:.0f} B ({format_bytes(calc.total_memory_bytes)})")
    print(f"Raw elements:     {calc.raw_elements}")
    print(f"N:                {calc.n}")
    print("=" * 50)


def main(argv: Optional[List[str]] = None, provider=None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        set_level(LOG_LEVELS["DEBUG"])

    try:
        if provider is None and (args.ram_per_node_gib is None or args.block_size is None):
            provider = get_capability_provider()
        config = resolve_config(
            provider=provider,
            node_count=args.node_count,
            ram_per_node_gib=args.ram_per_node_gib,
            mem_fraction=mem_fraction_from_share(args.mem_share),
            block_size=args.block_size,
        )
    except (ConfigurationError, CapabilityError) as e:
        logger.debug(f"Configuration failed: {e!r}")
        print_error_and_exit(e.message)

    try:
        calc = explain(config)
    except OverflowError as e:
        logger.debug(f"Calculation overflowed: {e!r}")
        print_error_and_exit(f"inputs too large to compute N: {e}")

    if calc.n == 0:
        print_error_and_exit(
            f"memory budget too small for block size {config.block_size}; no N > 0 fits"
        )

    if args.verbose:
        print_report(calc)
    print(calc.n)
    return 0


if __name__ == "__main__":
    sys.exit(main())
