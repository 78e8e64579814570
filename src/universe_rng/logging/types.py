"""Data types for the call logging subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProviderCallRecord:
    """Immutable record of a single backend call.

    Attributes:
        timestamp_ns: Wall-clock time the call started (nanoseconds since epoch).
        backend: Provider identifier (e.g. ``'random_org'``).
        operation: Backend operation (e.g. ``'generateIntegers'``, ``'uint8'``).
        count: Number of values requested.
        elapsed_ms: Wall time spent in the call (milliseconds).
        success: Whether the call returned data.
        error_type: Exception class name when the call failed.
        bits_used: Random.org quota counter, if reported.
        bits_left: Random.org quota counter, if reported.
        requests_left: Random.org quota counter, if reported.
        advisory_delay_ms: Random.org advisory delay, if reported.
    """

    timestamp_ns: int
    backend: str
    operation: str
    count: int
    elapsed_ms: float
    success: bool
    error_type: str | None = None

    # Quota (Random.org only)
    bits_used: int | None = None
    bits_left: int | None = None
    requests_left: int | None = None
    advisory_delay_ms: int | None = None
