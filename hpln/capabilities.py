"""
Host capability providers.

A provider answers two questions for the CLI: how much memory one node has
(in KiB) and which CPU feature flags it advertises. The calculator never
talks to a provider directly.
"""

from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, Optional

from hpln.utils import run_cmd, platform_system, total_ram
from hpln.__globals import logger, PROC_MEMINFO, PROC_CPUINFO


class CapabilityError(RuntimeError):
    """Raised when a platform source cannot be read or parsed."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"CapabilityError: {self.message}"

    def __repr__(self):
        return f"CapabilityError(message={self.message})"


class CapabilityProvider(ABC):
    name = "abstract"

    @abstractmethod
    def total_memory_kib(self) -> float:
        """Total physical memory of this node in KiB."""

    @abstractmethod
    def cpu_flags(self) -> FrozenSet[str]:
        """Lower-case CPU feature flags; empty when unknown."""


class LinuxCapabilityProvider(CapabilityProvider):
    """Reads ``/proc/meminfo`` and ``/proc/cpuinfo``."""

    name = "linux"

    def __init__(self, meminfo_path: str = PROC_MEMINFO, cpuinfo_path: str = PROC_CPUINFO):
        self.meminfo_path = meminfo_path
        self.cpuinfo_path = cpuinfo_path

    def total_memory_kib(self) -> float:
        try:
            with open(self.meminfo_path) as f:
                for line in f:
                    if line.startswith("MemTotal:"):
                        # "MemTotal:       131891120 kB"
                        return float(line.split()[1])
        except OSError as e:
            raise CapabilityError(f"cannot read {self.meminfo_path}: {e}")
        except (IndexError, ValueError):
            raise CapabilityError(f"malformed MemTotal line in {self.meminfo_path}")
        raise CapabilityError(f"no MemTotal entry in {self.meminfo_path}")

    def cpu_flags(self) -> FrozenSet[str]:
        try:
            with open(self.cpuinfo_path) as f:
                for line in f:
                    key, _, value = line.partition(":")
                    # x86 uses "flags", arm64 uses "Features"
                    if key.strip() in ("flags", "Features"):
                        return frozenset(value.lower().split())
        except OSError as e:
            logger.warning(f"Could not read CPU flags from {self.cpuinfo_path}: {e}")
        return frozenset()


class DarwinCapabilityProvider(CapabilityProvider):
    """Queries ``sysctl`` on macOS."""

    name = "darwin"

    def total_memory_kib(self) -> float:
        try:
            return int(run_cmd(["sysctl", "-n", "hw.memsize"])) / 1024
        except (OSError, RuntimeError, ValueError) as e:
            raise CapabilityError(f"sysctl hw.memsize failed: {e}")

    def cpu_flags(self) -> FrozenSet[str]:
        flags = set()
        # leaf7 carries the AVX-512 bits; absent on Apple silicon
        for key in ("machdep.cpu.features", "machdep.cpu.leaf7_features"):
            try:
                flags.update(run_cmd(["sysctl", "-n", key]).lower().split())
            except (OSError, RuntimeError) as e:
                logger.debug(f"sysctl {key} unavailable: {e}")
        return frozenset(flags)


class PsutilCapabilityProvider(CapabilityProvider):
    """Portable fallback: memory from psutil, no CPU flags."""

    name = "psutil"

    def total_memory_kib(self) -> float:
        return total_ram("KB")

    def cpu_flags(self) -> FrozenSet[str]:
        return frozenset()


class StaticCapabilityProvider(CapabilityProvider):
    """Fixed answers, for tests and for callers that already know the host."""

    name = "static"

    def __init__(self, memory_kib: Optional[float], flags: Iterable[str] = ()):
        self.memory_kib = memory_kib
        self.flags = frozenset(f.lower() for f in flags)

    def total_memory_kib(self) -> float:
        if self.memory_kib is None:
            raise CapabilityError("no memory size configured")
        return self.memory_kib

    def cpu_flags(self) -> FrozenSet[str]:
        return self.flags


def get_capability_provider(system: Optional[str] = None) -> CapabilityProvider:
    """Pick the provider matching ``system`` (defaults to the running OS)."""
    system = system or platform_system()
    if system == "Linux":
        provider = LinuxCapabilityProvider()
    elif system == "Darwin":
        provider = DarwinCapabilityProvider()
    else:
        provider = PsutilCapabilityProvider()
    logger.debug(f"Using {provider.name} capability provider for {system}")
    return provider
