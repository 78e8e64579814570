"""Tests for ANUQRNGClient (mocked HTTP transport)."""

from __future__ import annotations

from collections import deque
from typing import Any

import httpx
import pytest

from universe_rng.exceptions import ApiError, TransportError, ValidationError
from universe_rng.providers.anu import MAX_REDRAWS, ANUQRNGClient
from universe_rng.types import RandomKind


def _anu_handler(*batches: list[Any]) -> Any:
    """Serve successive batches; the last one is repeated to fill ``length``."""
    queue = deque(batches)

    def handler(request: httpx.Request) -> httpx.Response:
        batch = queue.popleft() if len(queue) > 1 else queue[0]
        length = int(request.url.params["length"])
        data = [batch[i % len(batch)] for i in range(length)]
        return httpx.Response(
            200,
            json={
                "type": request.url.params["type"],
                "length": length,
                "data": data,
                "success": True,
            },
        )

    return handler


@pytest.fixture
def anu(config: Any, make_http: Any) -> Any:
    """Factory for a client whose transport serves the given batches."""

    def factory(*batches: list[Any], reduction: str = "rejection") -> Any:
        http, spy = make_http(_anu_handler(*(batches or ([7],))))
        client = ANUQRNGClient(
            config.model_copy(update={"integer_reduction": reduction}),
            http_client=http,
        )
        client._spy = spy
        return client

    return factory


class TestGenerate:
    """uint8 / uint16 / hex16 requests."""

    @pytest.mark.parametrize("count", [1, 1024])
    def test_uint8_bounds_accepted(self, anu: Any, count: int) -> None:
        client = anu([200])
        assert client.generate_uint8(count) == [200] * count
        assert client._spy.call_count == 1

    @pytest.mark.parametrize("count", [0, 1025, -3])
    @pytest.mark.parametrize("method", ["generate_uint8", "generate_uint16", "generate_hex16"])
    def test_out_of_bounds_never_touches_network(
        self, anu: Any, method: str, count: int
    ) -> None:
        client = anu()
        with pytest.raises(ValidationError, match="between 1 and 1024"):
            getattr(client, method)(count)
        assert client._spy.call_count == 0

    def test_non_integer_count(self, anu: Any) -> None:
        client = anu()
        with pytest.raises(ValidationError):
            client.generate_uint8(2.5)
        assert client._spy.call_count == 0

    def test_query_parameters(self, anu: Any) -> None:
        client = anu(["00ff"])
        assert client.generate_hex16(3) == ["00ff"] * 3
        request = client._spy.requests[-1]
        assert request.method == "GET"
        assert request.url.params["length"] == "3"
        assert request.url.params["type"] == "hex16"
        assert request.url.host == "qrng.anu.edu.au"

    def test_uint16(self, anu: Any) -> None:
        client = anu([65535])
        assert client.generate_uint16(2) == [65535, 65535]
        assert client._spy.requests[-1].url.params["type"] == "uint16"

    def test_get_random_byte(self, anu: Any) -> None:
        assert anu([42]).get_random_byte() == 42


class TestFailures:
    """Transport and API failure policy."""

    def test_http_500_raises_transport_error(self, config: Any, make_http: Any) -> None:
        http, _ = make_http(lambda request: httpx.Response(500))
        client = ANUQRNGClient(config, http_client=http)
        with pytest.raises(TransportError) as exc_info:
            client.generate_uint8(1)
        assert exc_info.value.status_code == 500

    def test_success_false_raises_api_error(self, config: Any, make_http: Any) -> None:
        body = {"success": False, "message": "Rate limit exceeded"}
        http, _ = make_http(lambda request: httpx.Response(200, json=body))
        client = ANUQRNGClient(config, http_client=http)
        with pytest.raises(ApiError, match="Rate limit exceeded"):
            client.generate_uint8(1)

    def test_success_false_without_message(self, config: Any, make_http: Any) -> None:
        http, _ = make_http(lambda request: httpx.Response(200, json={"success": False}))
        client = ANUQRNGClient(config, http_client=http)
        with pytest.raises(ApiError, match="Unknown error"):
            client.generate_uint8(1)

    def test_short_batch_raises_transport_error(self, config: Any, make_http: Any) -> None:
        body = {"success": True, "data": [1]}
        http, _ = make_http(lambda request: httpx.Response(200, json=body))
        client = ANUQRNGClient(config, http_client=http)
        with pytest.raises(TransportError, match="expected 4 values"):
            client.generate_uint8(4)

    def test_timeout_raises_transport_error(self, config: Any, make_http: Any) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        http, _ = make_http(handler)
        client = ANUQRNGClient(config, http_client=http)
        with pytest.raises(TransportError):
            client.generate_uint16(1)


class TestRandomInt:
    """Range reduction for get_random_int / generate_ints."""

    def test_uint8_draw_of_57(self, anu: Any) -> None:
        client = anu([57])
        assert client.get_random_int(1, 100) == 58
        assert client._spy.requests[-1].url.params["type"] == "uint8"

    def test_rejection_redraws_biased_values(self, anu: Any) -> None:
        # 256 % 100 leaves 56 draws (200..255) that would favour 0..55.
        client = anu([250], [57])
        assert client.get_random_int(1, 100) == 58
        assert client._spy.call_count == 2

    def test_rejection_gives_up_after_bounded_redraws(self, anu: Any) -> None:
        client = anu([255])
        with pytest.raises(TransportError, match="redraws"):
            client.get_random_int(1, 100)
        assert client._spy.call_count == MAX_REDRAWS + 1

    def test_modulo_reduction_keeps_biased_values(self, anu: Any) -> None:
        client = anu([250], [57], reduction="modulo")
        assert client.get_random_int(1, 100) == 51
        assert client._spy.call_count == 1

    def test_full_uint8_range_never_rejects(self, anu: Any) -> None:
        client = anu([255])
        assert client.get_random_int(0, 255) == 255

    def test_wide_range_uses_uint16(self, anu: Any) -> None:
        client = anu([1234])
        assert client.get_random_int(0, 999) == 234
        assert client._spy.requests[-1].url.params["type"] == "uint16"

    @pytest.mark.parametrize(("low", "high"), [(5, 5), (10, 1), (0, 65536)])
    def test_invalid_ranges(self, anu: Any, low: int, high: int) -> None:
        client = anu()
        with pytest.raises(ValidationError):
            client.get_random_int(low, high)
        assert client._spy.call_count == 0

    def test_generate_ints_refills_rejected_slots(self, anu: Any) -> None:
        client = anu([10, 240, 20], [30])
        assert client.generate_ints(3, 0, 99) == [10, 20, 30]
        assert [r.url.params["length"] for r in client._spy.requests] == ["3", "1"]

    def test_unknown_reduction_rejected(self, config: Any) -> None:
        with pytest.raises(ValidationError, match="integer_reduction"):
            ANUQRNGClient(config.model_copy(update={"integer_reduction": "floor"}))


class TestProduce:
    """RandomnessProvider.produce() mapping."""

    def test_bytes(self, anu: Any) -> None:
        client = anu([1, 2, 3])
        assert client.get_random_bytes(3) == b"\x01\x02\x03"

    def test_hex(self, anu: Any) -> None:
        result = anu(["beef"]).produce(2, RandomKind.HEX)
        assert result.values == ("beef", "beef")
        assert result.backend == "anu_qrng"
        assert result.quota is None

    def test_unbounded_integers_are_uint16(self, anu: Any) -> None:
        client = anu([40000])
        assert client.produce(2, "integer").values == (40000, 40000)
        assert client._spy.requests[-1].url.params["type"] == "uint16"

    def test_bounded_integers(self, anu: Any) -> None:
        client = anu([57])
        assert client.produce(2, RandomKind.INTEGER, minimum=1, maximum=100).values == (58, 58)

    def test_half_bounded_integers_rejected(self, anu: Any) -> None:
        with pytest.raises(ValidationError):
            anu().produce(2, RandomKind.INTEGER, minimum=1)

    def test_uuid_unsupported(self, anu: Any) -> None:
        client = anu()
        with pytest.raises(ValidationError):
            client.produce(1, RandomKind.UUID)
        assert client._spy.call_count == 0

    def test_float64(self, anu: Any) -> None:
        import numpy as np

        values = anu([0, 255]).get_random_float64((2, 2))
        assert values.shape == (2, 2)
        assert values.dtype == np.float64
        assert values.tolist() == [[0.0, 1.0], [0.0, 1.0]]
