"""Randomness provider subsystem for universe-rng.

Re-exports the ABC, registry, and all built-in providers for convenient
access::

    from universe_rng.providers import RandomnessProvider, ProviderRegistry
    from universe_rng.providers import ANUQRNGClient, RandomOrgClient
"""

from universe_rng.providers.anu import ANUQRNGClient
from universe_rng.providers.base import RandomnessProvider
from universe_rng.providers.ibm_quantum import (
    IBMQuantumWrapper,
    SimulatorRunner,
    SubprocessSimulatorRunner,
)
from universe_rng.providers.random_org import RandomOrgClient
from universe_rng.providers.registry import ProviderRegistry, register_provider

__all__ = [
    "ANUQRNGClient",
    "IBMQuantumWrapper",
    "ProviderRegistry",
    "RandomOrgClient",
    "RandomnessProvider",
    "SimulatorRunner",
    "SubprocessSimulatorRunner",
    "register_provider",
]
