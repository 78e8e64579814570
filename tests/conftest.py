"""Shared pytest fixtures for universe-rng tests.

Provides isolated configuration objects and spy HTTP transports that record
every outgoing request, so tests can assert that validation failures never
reach the network.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from universe_rng.config import UniverseRNGConfig


class SpyTransport:
    """Callable handler for ``httpx.MockTransport`` that records requests."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_json(self) -> Any:
        """Decode the body of the most recent request."""
        return json.loads(self.requests[-1].content)


@pytest.fixture
def config() -> UniverseRNGConfig:
    """Config isolated from .env, with a dummy API key and quiet logging."""
    return UniverseRNGConfig(
        _env_file=None,  # type: ignore[call-arg]
        random_org_api_key="test-key",
        log_level="none",
    )


@pytest.fixture
def make_http() -> Callable[..., tuple[httpx.Client, SpyTransport]]:
    """Return a factory building an ``httpx.Client`` over a spy transport."""
    clients: list[httpx.Client] = []

    def factory(
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> tuple[httpx.Client, SpyTransport]:
        spy = SpyTransport(handler or (lambda request: httpx.Response(200, json={})))
        client = httpx.Client(transport=httpx.MockTransport(spy))
        clients.append(client)
        return client, spy

    yield factory
    for client in clients:
        client.close()
