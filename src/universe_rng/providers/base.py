"""Abstract base class for all randomness providers.

Every backend (Random.org, ANU QRNG, the IBM Quantum simulator, or one
registered by an application) implements this interface. The ABC validates the
requested kind, builds an immutable :class:`~universe_rng.types.RandomRequest`,
and delegates to the backend's ``_produce()``. It also provides
``get_random_bytes()`` and ``get_random_float64()`` on top of ``produce()``.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

from universe_rng.exceptions import ValidationError
from universe_rng.logging.types import ProviderCallRecord
from universe_rng.types import RandomKind, RandomRequest, RandomResult

if TYPE_CHECKING:
    from collections.abc import Iterator

    from universe_rng.logging.logger import CallLogger

logger = logging.getLogger("universe_rng")


def check_count(count: int, low: int, high: int, what: str = "Count") -> None:
    """Raise ValidationError unless ``low <= count <= high``."""
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValidationError(f"{what} must be an integer, got {count!r}")
    if count < low or count > high:
        raise ValidationError(f"{what} must be between {low} and {high}, got {count}")


class RandomnessProvider(ABC):
    """Abstract base for all randomness providers.

    Subclasses declare ``supported_kinds`` and implement ``name``,
    ``_produce()`` and ``close()``. A provider holds fixed configuration
    only; each call is independent of the previous one.
    """

    supported_kinds: ClassVar[frozenset[RandomKind]] = frozenset()

    _call_logger: CallLogger | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier (e.g., ``'random_org'``, ``'anu_qrng'``)."""

    def produce(
        self,
        count: int,
        kind: RandomKind | str,
        *,
        minimum: int | None = None,
        maximum: int | None = None,
        decimal_places: int | None = None,
    ) -> RandomResult:
        """Generate *count* values of *kind*.

        Args:
            count: Number of values to generate.
            kind: A :class:`RandomKind` or its string value.
            minimum: Inclusive lower bound (integers only).
            maximum: Inclusive upper bound (integers only).
            decimal_places: Precision (decimal fractions only).

        Returns:
            An immutable RandomResult.

        Raises:
            ValidationError: If *kind* is unsupported by this backend or a
                parameter is out of range. No I/O happens in that case.
            TransportError: If the network or subprocess call fails.
            ApiError: If the backend reports a structured failure.
        """
        try:
            kind = RandomKind(kind)
        except ValueError as exc:
            raise ValidationError(f"Unknown random kind: {kind!r}") from exc
        if kind not in self.supported_kinds:
            supported = ", ".join(sorted(k.value for k in self.supported_kinds))
            raise ValidationError(
                f"{self.name} cannot produce {kind.value!r} values (supported: {supported})"
            )
        request = RandomRequest(
            kind=kind,
            count=count,
            minimum=minimum,
            maximum=maximum,
            decimal_places=decimal_places,
        )
        return self._produce(request)

    @abstractmethod
    def _produce(self, request: RandomRequest) -> RandomResult:
        """Backend-specific generation for an already kind-checked request."""

    def get_random_bytes(self, n: int) -> bytes:
        """Return exactly *n* random bytes via ``produce(n, BYTES)``."""
        result = self.produce(n, RandomKind.BYTES)
        return bytes(result.values)

    def get_random_float64(self, shape: tuple[int, ...]) -> np.ndarray:
        """Return random float64 values in [0, 1].

        Converts ``get_random_bytes()`` output to float64 via
        ``np.frombuffer(dtype=uint8) / 255.0``.

        Args:
            shape: Desired output shape.

        Returns:
            Array of float64 values in [0, 1].
        """
        total = 1
        for dim in shape:
            total *= dim
        raw = self.get_random_bytes(total)
        values = np.frombuffer(raw, dtype=np.uint8).astype(np.float64) / 255.0
        return values.reshape(shape)

    @abstractmethod
    def close(self) -> None:
        """Release resources (HTTP clients)."""

    def health_check(self) -> dict[str, Any]:
        """Return a status dictionary for this provider.

        Returns:
            Dictionary with at least ``'source'`` and ``'healthy'`` keys.
        """
        return {"source": self.name, "healthy": True}

    def __enter__(self) -> RandomnessProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @contextmanager
    def _record_call(self, operation: str, count: int) -> Iterator[dict[str, Any]]:
        """Time one backend call and hand a record to the call logger.

        Yields a dict the caller may fill with quota fields
        (``bits_used``, ``bits_left``, ``requests_left``, ``advisory_delay_ms``).
        The record is emitted whether the call succeeds or raises.
        """
        quota: dict[str, Any] = {}
        timestamp_ns = time.time_ns()
        t0 = time.perf_counter()
        error_type: str | None = None
        try:
            yield quota
        except Exception as exc:
            error_type = type(exc).__name__
            raise
        finally:
            if self._call_logger is not None:
                self._call_logger.log_call(
                    ProviderCallRecord(
                        timestamp_ns=timestamp_ns,
                        backend=self.name,
                        operation=operation,
                        count=count,
                        elapsed_ms=(time.perf_counter() - t0) * 1000.0,
                        success=error_type is None,
                        error_type=error_type,
                        **quota,
                    )
                )
