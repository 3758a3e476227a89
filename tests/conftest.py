"""Shared fixtures: a stub upstream webhook built on httpx.MockTransport."""

from __future__ import annotations

import asyncio
import json
from typing import Callable

import httpx
import pytest

from app.gateway.config import GatewayConfig

WEBHOOK_URL = "https://n8n.example.test/webhook/deals"


class StubUpstream:
    """Records every outbound request and answers with a fixed response."""

    def __init__(self, status: int = 200, body: str = "OK", delay: float = 0.0) -> None:
        self.status = status
        self.body = body
        self.delay = delay
        self.requests: list[httpx.Request] = []
        self.aborted = False

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.aborted = True
                raise
        return httpx.Response(self.status, text=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def upstream() -> Callable[..., StubUpstream]:
    def _make(status: int = 200, body: str = "OK", delay: float = 0.0) -> StubUpstream:
        return StubUpstream(status=status, body=body, delay=delay)

    return _make


@pytest.fixture
def config() -> GatewayConfig:
    return GatewayConfig(webhook_url=WEBHOOK_URL)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "ALLOWED_ORIGIN",
        "N8N_WEBHOOK_URL",
        "N8N_USER",
        "N8N_PASS",
        "PROXY_TIMEOUT_MS",
        "ENFORCE_ORIGIN",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
