"""
Problem-size configuration.

All defaults are resolved here, once, into an immutable ``NConfig`` that the
calculator consumes. Nothing in ``hpln.calculator`` reads a default.
"""

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from hpln.__globals import (
    logger,
    DEFAULT_RATIO,
    DEFAULT_NODE_COUNT,
    DEFAULT_BLOCK_SIZE,
    WIDE_VECTOR_BLOCK_SIZE,
    WIDE_VECTOR_CPU_FLAG,
    KIB_PER_GIB,
    NODE_COUNT_ENV_VARS,
)


class ConfigurationError(ValueError):
    """Raised when an input cannot produce a meaningful N."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"ConfigurationError: {self.message}"

    def __repr__(self):
        return f"ConfigurationError(message={self.message})"


@dataclass(frozen=True)
class NConfig:
    """Fully resolved inputs for one N computation."""

    node_count: int
    ram_per_node_kib: float
    mem_fraction: float
    block_size: int

    def validate(self):
        if self.node_count < 1:
            raise ConfigurationError(f"node count must be >= 1, got {self.node_count}")
        if self.block_size < 1:
            raise ConfigurationError(f"block size must be >= 1, got {self.block_size}")
        if not (self.ram_per_node_kib > 0 and math.isfinite(self.ram_per_node_kib)):
            raise ConfigurationError(f"memory per node must be a finite value > 0 KiB, got {self.ram_per_node_kib}")
        if not 0 < self.mem_fraction <= 1:
            raise ConfigurationError(f"memory fraction must be in (0, 1], got {self.mem_fraction}")
        return self


# ---------------------------------------------------------------------------
# Unit conversions
# ---------------------------------------------------------------------------

def gib_to_kib(gib: float) -> float:
    return gib * KIB_PER_GIB


def mem_fraction_from_percent(percent: float) -> float:
    return percent / 100.0


def mem_fraction_from_ratio(ratio: float) -> float:
    if not 0 < ratio <= 1:
        raise ConfigurationError(f"ratio must be in (0, 1], got {ratio}")
    return ratio * ratio


# ---------------------------------------------------------------------------
# Default resolution
# ---------------------------------------------------------------------------

def node_count_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    """First node count found in NODE_COUNT_ENV_VARS, or None."""
    environ = os.environ if environ is None else environ
    for var in NODE_COUNT_ENV_VARS:
        raw = environ.get(var)
        if raw is None or raw.strip() == "":
            continue
        try:
            value = int(raw)
        except ValueError:
            raise ConfigurationError(f"{var} must be an integer, got '{raw}'")
        logger.debug(f"Node count {value} taken from ${var}")
        return value
    return None


def default_block_size(cpu_flags) -> int:
    if WIDE_VECTOR_CPU_FLAG in cpu_flags:
        logger.debug(f"CPU advertises {WIDE_VECTOR_CPU_FLAG}, using block size {WIDE_VECTOR_BLOCK_SIZE}")
        return WIDE_VECTOR_BLOCK_SIZE
    return DEFAULT_BLOCK_SIZE


def resolve_config(
        provider=None,
        node_count: Optional[int] = None,
        ram_per_node_gib: Optional[float] = None,
        mem_fraction: Optional[float] = None,
        block_size: Optional[int] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> NConfig:
    """Fill in every unset input and return a validated ``NConfig``.

    The provider is only consulted for what the caller left unset: memory
    when ``ram_per_node_gib`` is None, CPU flags when ``block_size`` is None.
    """
    if node_count is None:
        node_count = node_count_from_env(environ)
    if node_count is None:
        node_count = DEFAULT_NODE_COUNT

    if mem_fraction is None:
        mem_fraction = mem_fraction_from_ratio(DEFAULT_RATIO)

    if ram_per_node_gib is not None:
        ram_per_node_kib = gib_to_kib(ram_per_node_gib)
    else:
        if provider is None:
            raise ConfigurationError("memory size not given and no capability provider to detect it")
        ram_per_node_kib = provider.total_memory_kib()
        logger.debug(f"Detected {ram_per_node_kib} KiB of memory via {provider.name}")

    if block_size is None:
        cpu_flags = provider.cpu_flags() if provider is not None else frozenset()
        block_size = default_block_size(cpu_flags)

    return NConfig(
        node_count=node_count,
        ram_per_node_kib=ram_per_node_kib,
        mem_fraction=mem_fraction,
        block_size=block_size,
    ).validate()
