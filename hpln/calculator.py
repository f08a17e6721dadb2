"""
N-Calculator.

An N x N double-precision matrix occupies ``8 * N**2`` bytes, so the largest
N fitting in a memory budget is ``sqrt(budget / 8)``. N is then aligned down
to a multiple of the block size the benchmark tiles with.
"""

import math
from dataclasses import dataclass, asdict

from hpln.__globals import logger, DOUBLE_SIZE_BYTES, BYTES_PER_KIB


@dataclass(frozen=True)
class NCalculation:
    """Inputs and every intermediate value of one computation."""

    node_count: int
    ram_per_node_kib: float
    mem_fraction: float
    block_size: int
    total_memory_bytes: float
    raw_elements: int
    block_count: int
    n: int

    def to_dict(self):
        return asdict(self)


def round_half_away_from_zero(x: float) -> int:
    """Round to the nearest integer, ties going away from zero (2.5 -> 3, -2.5 -> -3)."""
    magnitude = abs(x)
    whole = math.floor(magnitude)
    # magnitude - whole is exact; adding 0.5 first can round up below a tie
    if magnitude - whole >= 0.5:
        whole += 1
    return whole if x >= 0 else -whole


def _calculate(node_count, ram_per_node_kib, mem_fraction, block_size) -> NCalculation:
    total_memory_bytes = node_count * ram_per_node_kib * BYTES_PER_KIB
    budget = mem_fraction * total_memory_bytes

    if budget <= 0:
        raw_elements = 0
    else:
        raw_elements = round_half_away_from_zero(math.sqrt(budget / DOUBLE_SIZE_BYTES))

    block_count = raw_elements // block_size
    n = block_count * block_size

    logger.debug(
        f"nodes={node_count} ram/node={ram_per_node_kib} KiB fraction={mem_fraction} "
        f"total={total_memory_bytes} B raw={raw_elements} NB={block_size} N={n}"
    )

    return NCalculation(
        node_count=node_count,
        ram_per_node_kib=ram_per_node_kib,
        mem_fraction=mem_fraction,
        block_size=block_size,
        total_memory_bytes=total_memory_bytes,
        raw_elements=raw_elements,
        block_count=block_count,
        n=n,
    )


def compute(node_count: int, ram_per_node_kib: float, mem_fraction: float, block_size: int) -> int:
    """Largest multiple of ``block_size`` not above the rounded element count.

    Inputs are taken as given: a non-positive memory budget yields 0. Callers
    validate before getting here (see ``hpln.config.NConfig.validate``).
    """
    return _calculate(node_count, ram_per_node_kib, mem_fraction, block_size).n


def explain(config) -> NCalculation:
    """Run the computation for an ``NConfig`` and keep the intermediate values."""
    return _calculate(config.node_count, config.ram_per_node_kib, config.mem_fraction, config.block_size)
