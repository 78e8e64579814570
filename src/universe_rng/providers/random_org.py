"""Random.org JSON-RPC client (true randomness from atmospheric noise).

Every operation serialises one JSON-RPC 2.0 envelope, POSTs it to the
``/json-rpc/4/invoke`` endpoint, and returns the ``result`` payload verbatim,
including the usage counters (``bitsUsed``, ``bitsLeft``, ``requestsLeft``,
``advisoryDelay``). The advisory delay is logged, never acted upon.

API documentation: https://api.random.org/json-rpc/4/basic
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from universe_rng.config import RandomOrgOptions, UniverseRNGConfig, resolve_options
from universe_rng.exceptions import ApiError, TransportError, ValidationError
from universe_rng.logging.logger import CallLogger
from universe_rng.providers.base import RandomnessProvider, check_count
from universe_rng.providers.registry import register_provider
from universe_rng.transport import build_http_client, send
from universe_rng.types import QuotaInfo, RandomKind, RandomRequest, RandomResult

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger("universe_rng")

MAX_INTEGERS = 10_000
MAX_DECIMALS = 10_000
MAX_BLOBS = 100
MAX_UUIDS = 1_000
INTEGER_LIMIT = 1_000_000_000
MAX_BLOB_BITS = 1_048_576
ALLOWED_BASES = frozenset({2, 8, 10, 16})
ALLOWED_BLOB_FORMATS = frozenset({"base64", "hex"})


def _check_bound(value: int, what: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{what} must be an integer, got {value!r}")
    if not -INTEGER_LIMIT <= value <= INTEGER_LIMIT:
        raise ValidationError(f"{what} must be between {-INTEGER_LIMIT} and {INTEGER_LIMIT}")


@register_provider("random_org")
class RandomOrgClient(RandomnessProvider):
    """Client for the Random.org basic JSON-RPC API.

    Args:
        config: Configuration providing the endpoint, API key and timeout.
            Loaded from the environment when omitted.
        api_key: Overrides ``config.random_org_api_key``.
        http_client: Pre-built ``httpx.Client``; the caller keeps ownership.
        call_logger: Overrides the logger built from *config*.
    """

    supported_kinds: ClassVar[frozenset[RandomKind]] = frozenset(
        {RandomKind.INTEGER, RandomKind.DECIMAL, RandomKind.BYTES, RandomKind.UUID}
    )

    def __init__(
        self,
        config: UniverseRNGConfig | None = None,
        *,
        api_key: str | None = None,
        http_client: httpx.Client | None = None,
        call_logger: CallLogger | None = None,
    ) -> None:
        config = config or UniverseRNGConfig()
        self._api_key = api_key if api_key is not None else config.random_org_api_key
        self._api_url = config.random_org_api_url
        self._owns_client = http_client is None
        self._http = http_client if http_client is not None else build_http_client(config)
        self._call_logger = call_logger if call_logger is not None else CallLogger(config)
        self._closed = False

    @property
    def name(self) -> str:
        """Return ``'random_org'``."""
        return "random_org"

    # --- API methods ---

    def generate_integers(
        self,
        count: int,
        minimum: int,
        maximum: int,
        options: RandomOrgOptions | Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Generate true random integers in ``[minimum, maximum]``.

        Args:
            count: Number of integers (1-10000).
            minimum: Inclusive lower bound (-1e9..1e9).
            maximum: Inclusive upper bound (-1e9..1e9).
            options: ``replacement`` (default True) and ``base``
                (2, 8, 10 or 16; default 10).

        Returns:
            The Random.org ``result`` object.

        Raises:
            ValidationError: On out-of-range parameters or a missing API key.
            TransportError: On network failure or a non-2xx response.
            ApiError: If Random.org returns a JSON-RPC error.
        """
        check_count(count, 1, MAX_INTEGERS)
        _check_bound(minimum, "Minimum")
        _check_bound(maximum, "Maximum")
        if minimum > maximum:
            raise ValidationError("Minimum must not be greater than maximum")
        opts = resolve_options(options)
        if opts.base not in ALLOWED_BASES:
            raise ValidationError(f"Base must be one of 2, 8, 10, 16, got {opts.base}")
        if not opts.replacement and count > maximum - minimum + 1:
            raise ValidationError(
                "Cannot draw more unique integers than the range contains "
                f"({count} > {maximum - minimum + 1})"
            )

        params = {
            "n": count,
            "min": minimum,
            "max": maximum,
            "replacement": opts.replacement,
            "base": opts.base,
        }
        return self._invoke("generateIntegers", params, count)

    def generate_decimal_fractions(
        self,
        count: int,
        decimal_places: int,
        options: RandomOrgOptions | Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Generate decimal fractions uniformly distributed in ``[0, 1)``.

        Args:
            count: Number of fractions (1-10000).
            decimal_places: Digits after the decimal point (1-20).
            options: ``replacement`` (default True).
        """
        check_count(count, 1, MAX_DECIMALS)
        check_count(decimal_places, 1, 20, "Decimal places")
        opts = resolve_options(options)

        params = {
            "n": count,
            "decimalPlaces": decimal_places,
            "replacement": opts.replacement,
        }
        return self._invoke("generateDecimalFractions", params, count)

    def generate_blobs(
        self,
        count: int,
        options: RandomOrgOptions | Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Generate random binary large objects.

        Args:
            count: Number of blobs (1-100).
            options: ``size`` in bits per blob (divisible by 8, default 8)
                and ``format`` (``'base64'`` or ``'hex'``; default base64).
        """
        check_count(count, 1, MAX_BLOBS)
        opts = resolve_options(options)
        check_count(opts.size, 1, MAX_BLOB_BITS, "Blob size")
        if opts.size % 8:
            raise ValidationError(f"Blob size must be divisible by 8, got {opts.size}")
        if count * opts.size > MAX_BLOB_BITS:
            raise ValidationError(
                f"Total blob size must not exceed {MAX_BLOB_BITS} bits, got {count * opts.size}"
            )
        if opts.format not in ALLOWED_BLOB_FORMATS:
            raise ValidationError(f"Blob format must be 'base64' or 'hex', got {opts.format!r}")

        params = {
            "n": count,
            "size": opts.size,
            "format": opts.format,
        }
        return self._invoke("generateBlobs", params, count)

    def generate_uuids(self, count: int) -> dict[str, Any]:
        """Generate version 4 UUIDs.

        Args:
            count: Number of UUIDs (1-1000).
        """
        check_count(count, 1, MAX_UUIDS)
        return self._invoke("generateUUIDs", {"n": count}, count)

    # --- Provider contract ---

    def _produce(self, request: RandomRequest) -> RandomResult:
        kind = request.kind
        if kind is RandomKind.INTEGER:
            if request.minimum is None or request.maximum is None:
                raise ValidationError("Random.org integers require both minimum and maximum")
            result = self.generate_integers(request.count, request.minimum, request.maximum)
            values = result["random"]["data"]
        elif kind is RandomKind.DECIMAL:
            if request.decimal_places is None:
                raise ValidationError("Random.org decimal fractions require decimal_places")
            result = self.generate_decimal_fractions(request.count, request.decimal_places)
            values = result["random"]["data"]
        elif kind is RandomKind.BYTES:
            # One blob of count*8 bits, hex-encoded, unpacks to exactly count bytes.
            check_count(request.count, 1, MAX_BLOB_BITS // 8)
            result = self.generate_blobs(1, {"size": request.count * 8, "format": "hex"})
            values = bytes.fromhex(result["random"]["data"][0])
        else:
            result = self.generate_uuids(request.count)
            values = result["random"]["data"]

        return RandomResult(
            values=tuple(values),
            backend=self.name,
            completion_time=result["random"].get("completionTime"),
            quota=QuotaInfo.from_payload(result),
        )

    # --- Transport ---

    def _invoke(self, method: str, params: dict[str, Any], count: int) -> dict[str, Any]:
        """POST one JSON-RPC request and return its ``result`` member.

        Raises:
            ValidationError: If no API key is configured.
            TransportError: On network failure, non-2xx status, or a
                malformed JSON-RPC envelope.
            ApiError: If the envelope carries an ``error`` member.
        """
        if not self._api_key:
            raise ValidationError(
                "Random.org API key is not set (export RANDOM_ORG_API_KEY)"
            )
        if self._closed:
            raise TransportError("RandomOrgClient is closed")

        body = {
            "jsonrpc": "2.0",
            "method": method,
            "params": {"apiKey": self._api_key, **params},
            "id": uuid.uuid4().hex,
        }

        with self._record_call(method, count) as quota:
            request = self._http.build_request("POST", self._api_url, json=body)
            data = send(self._http, request, "Random.org")
            if not isinstance(data, dict):
                raise TransportError("Error fetching Random.org data: malformed JSON-RPC response")

            error = data.get("error")
            if error:
                if isinstance(error, dict):
                    raise ApiError(
                        f"API error: {error.get('message', 'Unknown error')}",
                        code=error.get("code"),
                        data=error.get("data"),
                    )
                raise ApiError(f"API error: {error}")

            result = data.get("result")
            if not isinstance(result, dict):
                raise TransportError("Error fetching Random.org data: response has no result")

            info = QuotaInfo.from_payload(result)
            quota.update(
                bits_used=info.bits_used,
                bits_left=info.bits_left,
                requests_left=info.requests_left,
                advisory_delay_ms=info.advisory_delay_ms,
            )
            if info.advisory_delay_ms:
                logger.debug(
                    "Random.org advises waiting %d ms before the next request",
                    info.advisory_delay_ms,
                )
            return result

    # --- Lifecycle ---

    def close(self) -> None:
        """Close the HTTP client if this instance created it (idempotent)."""
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            self._http.close()

    def health_check(self) -> dict[str, Any]:
        """Return status without ever exposing the API key.

        Only a boolean ``authenticated`` flag reports whether a key is set.
        """
        return {
            "source": self.name,
            "healthy": not self._closed and bool(self._api_key),
            "url": self._api_url,
            "authenticated": bool(self._api_key),
        }
