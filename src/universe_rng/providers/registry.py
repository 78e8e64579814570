"""Name-to-class registry for randomness providers.

Each backend registers itself with ``@register_provider`` when its module is
imported. Registration checks that the class is a concrete
:class:`~universe_rng.providers.base.RandomnessProvider` declaring at least
one :class:`~universe_rng.types.RandomKind`, so a lookup never hands back
something ``produce()`` cannot serve.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, ClassVar

from universe_rng.providers.base import RandomnessProvider
from universe_rng.types import RandomKind

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("universe_rng")


class ProviderRegistry:
    """Registry of provider classes keyed by backend name."""

    _registry: ClassVar[dict[str, type[RandomnessProvider]]] = {}

    @classmethod
    def register(
        cls, name: str
    ) -> Callable[[type[RandomnessProvider]], type[RandomnessProvider]]:
        """Decorator registering a provider class under *name*.

        Example::

            @ProviderRegistry.register("my_backend")
            class MyBackend(RandomnessProvider):
                supported_kinds = frozenset({RandomKind.BYTES})
                ...

        Raises:
            TypeError: If the class is not a concrete RandomnessProvider or
                declares no supported kinds.
            ValueError: If *name* is already taken by a different class.
        """

        def decorator(provider_cls: type[RandomnessProvider]) -> type[RandomnessProvider]:
            if not (isinstance(provider_cls, type) and issubclass(provider_cls, RandomnessProvider)):
                raise TypeError(f"{provider_cls!r} is not a RandomnessProvider subclass")
            if inspect.isabstract(provider_cls):
                raise TypeError(f"{provider_cls.__name__} is abstract and cannot be registered")
            if not provider_cls.supported_kinds:
                raise TypeError(f"{provider_cls.__name__} declares no supported kinds")

            existing = cls._registry.get(name)
            if existing is not None and existing is not provider_cls:
                raise ValueError(
                    f"Randomness provider {name!r} is already registered to {existing.__name__}"
                )
            cls._registry[name] = provider_cls
            logger.debug(
                "Registered randomness provider %r (%s)",
                name,
                ", ".join(sorted(kind.value for kind in provider_cls.supported_kinds)),
            )
            return provider_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type[RandomnessProvider]:
        """Look up a provider class by name.

        Raises:
            KeyError: If *name* is not registered.
        """
        try:
            return cls._registry[name]
        except KeyError:
            available = ", ".join(sorted(cls._registry)) or "(none)"
            raise KeyError(
                f"Unknown randomness provider: {name!r}. Available: {available}"
            ) from None

    @classmethod
    def list_available(cls) -> list[str]:
        """Return all registered provider names, sorted."""
        return sorted(cls._registry)

    @classmethod
    def supporting(cls, kind: RandomKind | str) -> list[str]:
        """Return the sorted names of providers that can produce *kind*.

        Raises:
            ValueError: If *kind* is not a known RandomKind value.
        """
        kind = RandomKind(kind)
        return sorted(
            name for name, provider_cls in cls._registry.items()
            if kind in provider_cls.supported_kinds
        )


register_provider = ProviderRegistry.register
