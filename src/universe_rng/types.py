"""Value objects shared by all randomness providers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


class RandomKind(str, enum.Enum):
    """Kind of random value a provider is asked to produce."""

    INTEGER = "integer"
    DECIMAL = "decimal"
    BYTES = "bytes"
    UUID = "uuid"
    BITSTRING = "bitstring"
    HEX = "hex"


@dataclass(frozen=True, slots=True)
class RandomRequest:
    """Immutable description of a single ``produce()`` call.

    Attributes:
        kind: What to generate.
        count: How many values to generate.
        minimum: Inclusive lower bound (integers only).
        maximum: Inclusive upper bound (integers only).
        decimal_places: Precision (decimal fractions only).
    """

    kind: RandomKind
    count: int
    minimum: int | None = None
    maximum: int | None = None
    decimal_places: int | None = None


@dataclass(frozen=True, slots=True)
class QuotaInfo:
    """Usage counters reported by a metered backend (Random.org).

    ``advisory_delay_ms`` is informational only; clients never sleep on it.
    """

    bits_used: int | None = None
    bits_left: int | None = None
    requests_left: int | None = None
    advisory_delay_ms: int | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> QuotaInfo:
        """Build from a Random.org ``result`` object (camelCase keys)."""
        return cls(
            bits_used=payload.get("bitsUsed"),
            bits_left=payload.get("bitsLeft"),
            requests_left=payload.get("requestsLeft"),
            advisory_delay_ms=payload.get("advisoryDelay"),
        )


@dataclass(frozen=True, slots=True)
class RandomResult:
    """Immutable result of a ``produce()`` call.

    Attributes:
        values: Generated values (ints, floats or strings depending on kind).
        backend: Identifier of the provider that produced the values.
        completion_time: Backend-reported completion timestamp, if any.
        quota: Usage counters, for metered backends.
        extra: Any further backend metadata (read-only).
    """

    values: tuple[Any, ...]
    backend: str
    completion_time: str | None = None
    quota: QuotaInfo | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))


@dataclass(frozen=True, slots=True)
class QuantumBits:
    """Bits measured from a simulated quantum circuit.

    Attributes:
        bits: Measured bitstring, most significant bit first.
        integer: Integer projection of ``bits``.
        backend: Simulator backend that ran the circuit.
    """

    bits: str
    integer: int
    backend: str
