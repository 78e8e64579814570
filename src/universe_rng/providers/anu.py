"""ANU Quantum Random Number Generator client.

Values come from quantum fluctuations of the vacuum, measured at the
Australian National University. The API is keyless; each call is a single
GET with ``length`` and ``type`` (``uint8``, ``uint16`` or ``hex16``) query
parameters and returns at most 1024 values.

Integer ranges are mapped onto a uint8 draw (range <= 256) or a uint16 draw
(range > 256). With ``integer_reduction='rejection'`` (the default) draws in
the incomplete top segment of the draw space are discarded and redrawn, so
every value in the range is equally likely. ``'modulo'`` reproduces the
plain ``min + value % range`` reduction, which is biased whenever the range
does not divide 256 or 65536.

API documentation: https://qrng.anu.edu.au/API/api-demo.php
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from universe_rng.config import INTEGER_REDUCTIONS, UniverseRNGConfig, check_choice
from universe_rng.exceptions import ApiError, TransportError, ValidationError
from universe_rng.logging.logger import CallLogger
from universe_rng.providers.base import RandomnessProvider, check_count
from universe_rng.providers.registry import register_provider
from universe_rng.transport import build_http_client, send
from universe_rng.types import RandomKind, RandomRequest, RandomResult

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger("universe_rng")

MAX_LENGTH = 1024
UINT8_SPACE = 256
UINT16_SPACE = 65536
# Redraw rounds allowed after the first draw before rejection sampling gives up.
MAX_REDRAWS = 8


@register_provider("anu_qrng")
class ANUQRNGClient(RandomnessProvider):
    """Client for the ANU QRNG JSON API.

    Args:
        config: Configuration providing the endpoint, timeout and
            ``integer_reduction``. Loaded from the environment when omitted.
        http_client: Pre-built ``httpx.Client``; the caller keeps ownership.
        call_logger: Overrides the logger built from *config*.

    Raises:
        ValidationError: If ``config.integer_reduction`` is unknown.
    """

    supported_kinds: ClassVar[frozenset[RandomKind]] = frozenset(
        {RandomKind.INTEGER, RandomKind.BYTES, RandomKind.HEX}
    )

    def __init__(
        self,
        config: UniverseRNGConfig | None = None,
        *,
        http_client: httpx.Client | None = None,
        call_logger: CallLogger | None = None,
    ) -> None:
        config = config or UniverseRNGConfig()
        self._api_url = config.anu_api_url
        self._reduction = check_choice(
            "integer_reduction", config.integer_reduction, INTEGER_REDUCTIONS
        )
        self._owns_client = http_client is None
        self._http = http_client if http_client is not None else build_http_client(config)
        self._call_logger = call_logger if call_logger is not None else CallLogger(config)
        self._closed = False

    @property
    def name(self) -> str:
        """Return ``'anu_qrng'``."""
        return "anu_qrng"

    # --- API methods ---

    def generate_uint8(self, count: int) -> list[int]:
        """Return *count* (1-1024) values in 0..255."""
        check_count(count, 1, MAX_LENGTH)
        return self._request("uint8", count)

    def generate_uint16(self, count: int) -> list[int]:
        """Return *count* (1-1024) values in 0..65535."""
        check_count(count, 1, MAX_LENGTH)
        return self._request("uint16", count)

    def generate_hex16(self, count: int) -> list[str]:
        """Return *count* (1-1024) four-character hex strings."""
        check_count(count, 1, MAX_LENGTH)
        return self._request("hex16", count)

    # --- Derived helpers ---

    def get_random_byte(self) -> int:
        """Return a single uint8 value."""
        return self.generate_uint8(1)[0]

    def get_random_int(self, minimum: int, maximum: int) -> int:
        """Return a random integer in ``[minimum, maximum]``.

        Raises:
            ValidationError: If ``minimum >= maximum`` or the range spans
                more than 65536 values.
        """
        span = self._check_range(minimum, maximum)
        return minimum + self._draw_reduced(1, span)[0]

    def generate_ints(self, count: int, minimum: int, maximum: int) -> list[int]:
        """Return *count* (1-1024) random integers in ``[minimum, maximum]``."""
        check_count(count, 1, MAX_LENGTH)
        span = self._check_range(minimum, maximum)
        return [minimum + offset for offset in self._draw_reduced(count, span)]

    @staticmethod
    def _check_range(minimum: int, maximum: int) -> int:
        for value, what in ((minimum, "Minimum"), (maximum, "Maximum")):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{what} must be an integer, got {value!r}")
        if minimum >= maximum:
            raise ValidationError("Min must be less than max")
        span = maximum - minimum + 1
        if span > UINT16_SPACE:
            raise ValidationError(
                f"Range must span at most {UINT16_SPACE} values, got {span}"
            )
        return span

    def _draw_reduced(self, count: int, span: int) -> list[int]:
        """Draw *count* offsets in ``[0, span)``.

        Uses uint8 draws for spans up to 256 and uint16 draws otherwise.

        Raises:
            TransportError: If the service keeps returning rejected draws
                for more than ``MAX_REDRAWS`` rounds.
        """
        if span <= UINT8_SPACE:
            draw, space = self.generate_uint8, UINT8_SPACE
        else:
            draw, space = self.generate_uint16, UINT16_SPACE

        if self._reduction == "modulo":
            return [value % span for value in draw(count)]

        limit = space - space % span
        offsets: list[int] = []
        rounds = 0
        while len(offsets) < count:
            if rounds > MAX_REDRAWS:
                raise TransportError(
                    "Error fetching quantum random data: service kept returning "
                    f"draws at or above {limit} after {MAX_REDRAWS} redraws"
                )
            rounds += 1
            needed = count - len(offsets)
            accepted = [value % span for value in draw(needed) if value < limit]
            if len(accepted) < needed:
                logger.debug(
                    "Rejected %d draws at or above %d, redrawing",
                    needed - len(accepted),
                    limit,
                )
            offsets.extend(accepted)
        return offsets

    # --- Provider contract ---

    def _produce(self, request: RandomRequest) -> RandomResult:
        kind = request.kind
        if kind is RandomKind.BYTES:
            values: list[Any] = self.generate_uint8(request.count)
        elif kind is RandomKind.HEX:
            values = self.generate_hex16(request.count)
        elif request.minimum is None and request.maximum is None:
            values = self.generate_uint16(request.count)
        elif request.minimum is None or request.maximum is None:
            raise ValidationError("ANU integers need both minimum and maximum, or neither")
        else:
            values = self.generate_ints(request.count, request.minimum, request.maximum)
        return RandomResult(values=tuple(values), backend=self.name)

    # --- Transport ---

    def _request(self, value_type: str, count: int) -> list[Any]:
        """GET one batch of values.

        Raises:
            TransportError: On network failure or a non-2xx response.
            ApiError: If the response reports ``success: false``.
        """
        if self._closed:
            raise TransportError("ANUQRNGClient is closed")

        with self._record_call(value_type, count):
            request = self._http.build_request(
                "GET",
                self._api_url,
                params={"length": count, "type": value_type},
            )
            data = send(self._http, request, "quantum random")
            if not isinstance(data, dict):
                raise TransportError("Error fetching quantum random data: malformed response")
            if not data.get("success"):
                raise ApiError(f"API error: {data.get('message') or 'Unknown error'}")
            values = data.get("data")
            if not isinstance(values, list) or len(values) != count:
                raise TransportError(
                    f"Error fetching quantum random data: expected {count} values"
                )
            return values

    # --- Lifecycle ---

    def close(self) -> None:
        """Close the HTTP client if this instance created it (idempotent)."""
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            self._http.close()

    def health_check(self) -> dict[str, Any]:
        """Return status including the configured reduction mode."""
        return {
            "source": self.name,
            "healthy": not self._closed,
            "url": self._api_url,
            "integer_reduction": self._reduction,
        }
