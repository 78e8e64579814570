"""Exception hierarchy for universe-rng.

All exceptions derive from UniverseRNGError, enabling broad catch patterns
at the application boundary while allowing fine-grained handling internally.
"""

from __future__ import annotations

from typing import Any


class UniverseRNGError(Exception):
    """Base exception for all universe-rng errors."""


class ValidationError(UniverseRNGError):
    """Request parameters violate a backend's documented bounds.

    Raised locally, before any network request or subprocess launch.
    Also raised for unknown option keys and invalid enumerated config values.
    """


class TransportError(UniverseRNGError):
    """The network or subprocess call failed.

    Raised for non-success HTTP statuses, connection failures, timeouts,
    unparseable response bodies, and simulator processes that cannot be
    launched or exit with a non-zero code.

    Attributes:
        status_code: HTTP status or process exit code, ``None`` when the
            call never produced one (e.g. DNS failure, timeout).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiError(UniverseRNGError):
    """The remote service reported a structured failure.

    Attributes:
        code: Remote error code (JSON-RPC ``error.code``), if any.
        message: Remote error message.
        data: Optional remote error payload.
    """

    def __init__(self, message: str, code: Any = None, data: Any = None) -> None:
        super().__init__(f"{message} (code: {code})" if code is not None else message)
        self.code = code
        self.message = message
        self.data = data
