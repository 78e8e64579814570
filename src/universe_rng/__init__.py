"""universe-rng: one contract over Random.org, ANU QRNG and a quantum simulator.

Thin clients for three sources of true (or simulated quantum) randomness,
each validating its parameters locally and surfacing failures as typed
errors.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("universe-rng")
except PackageNotFoundError:
    __version__ = "0.0.0"

from universe_rng.config import RandomOrgOptions, UniverseRNGConfig, resolve_options
from universe_rng.exceptions import (
    ApiError,
    TransportError,
    UniverseRNGError,
    ValidationError,
)
from universe_rng.factory import build_provider
from universe_rng.providers import (
    ANUQRNGClient,
    IBMQuantumWrapper,
    ProviderRegistry,
    RandomnessProvider,
    RandomOrgClient,
)
from universe_rng.provisioning import DependencyInstaller
from universe_rng.types import QuantumBits, QuotaInfo, RandomKind, RandomRequest, RandomResult

__all__ = [
    "ANUQRNGClient",
    "ApiError",
    "DependencyInstaller",
    "IBMQuantumWrapper",
    "ProviderRegistry",
    "QuantumBits",
    "QuotaInfo",
    "RandomKind",
    "RandomOrgClient",
    "RandomOrgOptions",
    "RandomRequest",
    "RandomResult",
    "RandomnessProvider",
    "TransportError",
    "UniverseRNGConfig",
    "UniverseRNGError",
    "ValidationError",
    "__version__",
    "build_provider",
    "resolve_options",
]
