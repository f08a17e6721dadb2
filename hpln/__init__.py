from .calculator import compute, explain, round_half_away_from_zero, NCalculation
from .config import NConfig, ConfigurationError, resolve_config
from .capabilities import (
    CapabilityProvider,
    CapabilityError,
    LinuxCapabilityProvider,
    DarwinCapabilityProvider,
    PsutilCapabilityProvider,
    StaticCapabilityProvider,
    get_capability_provider,
)

__version__ = "0.1.0"

__all__ = [
    "compute",
    "explain",
    "round_half_away_from_zero",
    "NCalculation",
    "NConfig",
    "ConfigurationError",
    "resolve_config",
    "CapabilityProvider",
    "CapabilityError",
    "LinuxCapabilityProvider",
    "DarwinCapabilityProvider",
    "PsutilCapabilityProvider",
    "StaticCapabilityProvider",
    "get_capability_provider",
]
