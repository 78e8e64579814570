"""Tests for ProviderRegistry and build_provider."""

from __future__ import annotations

from typing import Any, ClassVar

import pytest

from universe_rng.config import UniverseRNGConfig
from universe_rng.factory import _accepts_config, build_provider
from universe_rng.providers import ANUQRNGClient, IBMQuantumWrapper, RandomOrgClient
from universe_rng.providers.base import RandomnessProvider
from universe_rng.providers.registry import ProviderRegistry
from universe_rng.types import RandomKind, RandomRequest, RandomResult


class _DummyProvider(RandomnessProvider):
    """Minimal concrete provider for registry tests."""

    supported_kinds: ClassVar[frozenset[RandomKind]] = frozenset({RandomKind.BYTES})

    @property
    def name(self) -> str:
        return "dummy"

    def _produce(self, request: RandomRequest) -> RandomResult:
        return RandomResult(values=(0,) * request.count, backend=self.name)

    def close(self) -> None:
        pass


class TestProviderRegistry:
    """Tests for decorator registration and lookup."""

    def setup_method(self) -> None:
        """Save registry state before each test."""
        self._saved_registry = dict(ProviderRegistry._registry)

    def teardown_method(self) -> None:
        """Restore registry state after each test."""
        ProviderRegistry._registry = self._saved_registry

    def test_builtins_registered(self) -> None:
        assert ProviderRegistry.get("random_org") is RandomOrgClient
        assert ProviderRegistry.get("anu_qrng") is ANUQRNGClient
        assert ProviderRegistry.get("ibm_quantum") is IBMQuantumWrapper

    def test_register_and_get(self) -> None:
        @ProviderRegistry.register("test_provider")
        class TestProvider(_DummyProvider):
            pass

        assert ProviderRegistry.get("test_provider") is TestProvider

    def test_get_unknown_lists_available(self) -> None:
        with pytest.raises(KeyError, match="no_such_provider") as exc_info:
            ProviderRegistry.get("no_such_provider")
        assert "anu_qrng" in str(exc_info.value)

    def test_list_available_is_sorted(self) -> None:
        ProviderRegistry.register("zzz_provider")(_DummyProvider)
        ProviderRegistry.register("aaa_provider")(_DummyProvider)
        available = ProviderRegistry.list_available()
        assert available == sorted(available)
        assert {"aaa_provider", "zzz_provider", "anu_qrng"} <= set(available)

    def test_reregistering_same_class_is_allowed(self) -> None:
        ProviderRegistry.register("anu_qrng")(ANUQRNGClient)
        assert ProviderRegistry.get("anu_qrng") is ANUQRNGClient

    def test_name_taken_by_other_class(self) -> None:
        with pytest.raises(ValueError, match="already registered to ANUQRNGClient"):
            ProviderRegistry.register("anu_qrng")(_DummyProvider)
        assert ProviderRegistry.get("anu_qrng") is ANUQRNGClient

    def test_non_provider_rejected(self) -> None:
        class NotAProvider:
            supported_kinds = frozenset({RandomKind.BYTES})

        with pytest.raises(TypeError, match="not a RandomnessProvider"):
            ProviderRegistry.register("bogus")(NotAProvider)  # type: ignore[arg-type]
        assert "bogus" not in ProviderRegistry.list_available()

    def test_abstract_provider_rejected(self) -> None:
        class Unfinished(RandomnessProvider):
            supported_kinds: ClassVar[frozenset[RandomKind]] = frozenset({RandomKind.BYTES})

        with pytest.raises(TypeError, match="abstract"):
            ProviderRegistry.register("unfinished")(Unfinished)

    def test_provider_without_kinds_rejected(self) -> None:
        class Empty(_DummyProvider):
            supported_kinds: ClassVar[frozenset[RandomKind]] = frozenset()

        with pytest.raises(TypeError, match="no supported kinds"):
            ProviderRegistry.register("empty")(Empty)


class TestSupporting:
    def test_bytes_served_by_every_builtin(self) -> None:
        assert ProviderRegistry.supporting(RandomKind.BYTES) == [
            "anu_qrng",
            "ibm_quantum",
            "random_org",
        ]

    def test_kind_specific_backends(self) -> None:
        assert ProviderRegistry.supporting("uuid") == ["random_org"]
        assert ProviderRegistry.supporting(RandomKind.BITSTRING) == ["ibm_quantum"]
        assert ProviderRegistry.supporting(RandomKind.HEX) == ["anu_qrng"]

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            ProviderRegistry.supporting("colour")


class TestBuildProvider:
    def setup_method(self) -> None:
        self._saved_registry = dict(ProviderRegistry._registry)

    def teardown_method(self) -> None:
        ProviderRegistry._registry = self._saved_registry

    def test_passes_config(self, config: Any) -> None:
        provider = build_provider("anu_qrng", config.model_copy(update={"anu_api_url": "http://x/"}))
        try:
            assert isinstance(provider, ANUQRNGClient)
            assert provider.health_check()["url"] == "http://x/"
        finally:
            provider.close()

    def test_no_config_constructor(self) -> None:
        ProviderRegistry.register("dummy")(_DummyProvider)
        assert isinstance(build_provider("dummy"), _DummyProvider)

    def test_unknown_name(self) -> None:
        with pytest.raises(KeyError):
            build_provider("nope")

    def test_accepts_config_detection(self) -> None:
        class Annotated:
            def __init__(self, settings: UniverseRNGConfig) -> None: ...

        class Named:
            def __init__(self, config) -> None: ...  # type: ignore[no-untyped-def]

        class Other:
            def __init__(self, seed: int = 0) -> None: ...

        assert _accepts_config(RandomOrgClient) is True
        assert _accepts_config(Annotated) is True
        assert _accepts_config(Named) is True
        assert _accepts_config(Other) is False
        assert _accepts_config(_DummyProvider) is False
