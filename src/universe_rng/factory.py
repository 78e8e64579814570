"""Build registered randomness providers by name."""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

from universe_rng.config import UniverseRNGConfig
from universe_rng.providers.registry import ProviderRegistry

if TYPE_CHECKING:
    from universe_rng.providers.base import RandomnessProvider

logger = logging.getLogger("universe_rng")


def _accepts_config(cls: type) -> bool:
    """Check if a class constructor accepts a UniverseRNGConfig as first arg.

    Inspects the ``__init__`` signature for a first parameter annotated as
    ``UniverseRNGConfig`` (or, when unannotated, named ``config``).
    """
    try:
        sig = inspect.signature(cls)
    except (ValueError, TypeError):
        return False

    for param in sig.parameters.values():
        annotation = param.annotation
        if annotation is inspect.Parameter.empty:
            return param.name == "config"
        if annotation is UniverseRNGConfig or (
            isinstance(annotation, str) and "UniverseRNGConfig" in annotation
        ):
            return True
        # Only check the first parameter.
        break
    return False


def build_provider(name: str, config: UniverseRNGConfig | None = None) -> RandomnessProvider:
    """Instantiate the provider registered under *name*.

    Args:
        name: Registry key (``'random_org'``, ``'anu_qrng'``, ``'ibm_quantum'``
            or any name passed to ``@register_provider``).
        config: Configuration passed to constructors that accept one.
            Loaded from the environment when omitted.

    Returns:
        A ready-to-use provider. The caller owns it and must close it.

    Raises:
        KeyError: If no provider is registered under *name*.
    """
    provider_cls = ProviderRegistry.get(name)
    if _accepts_config(provider_cls):
        provider = provider_cls(config or UniverseRNGConfig())  # type: ignore[call-arg]
    else:
        provider = provider_cls()
    logger.debug("Built randomness provider %r (%s)", name, provider_cls.__name__)
    return provider
