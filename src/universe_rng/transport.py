"""Shared httpx client construction and response decoding.

Centralises timeouts and headers so both REST backends behave the same, and
lets tests substitute an ``httpx.MockTransport``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from universe_rng.exceptions import TransportError

if TYPE_CHECKING:
    from universe_rng.config import UniverseRNGConfig


def build_http_client(
    config: UniverseRNGConfig,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an ``httpx.Client`` with the configured timeout and User-Agent.

    Args:
        config: Configuration providing ``http_timeout_s`` and ``user_agent``.
        transport: Optional transport override (e.g. ``httpx.MockTransport``).

    Returns:
        A new client. The caller owns it and must close it.
    """
    return httpx.Client(
        timeout=httpx.Timeout(config.http_timeout_s),
        headers={
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        },
        transport=transport,
    )


def send(client: httpx.Client, request: httpx.Request, service: str) -> Any:
    """Send *request* and decode its JSON body.

    Args:
        client: Client to send with.
        request: Prepared request.
        service: Human-readable service name for error messages.

    Returns:
        The decoded JSON document.

    Raises:
        TransportError: On network failure, non-2xx status, or a body that
            is not valid JSON.
    """
    try:
        response = client.send(request)
    except httpx.HTTPError as exc:
        raise TransportError(f"Error fetching {service} data: {exc}") from exc

    if not response.is_success:
        raise TransportError(
            f"Error fetching {service} data: HTTP error! Status: {response.status_code}",
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as exc:
        raise TransportError(
            f"Error fetching {service} data: response is not valid JSON",
            status_code=response.status_code,
        ) from exc
