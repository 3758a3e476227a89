"""Thin HTTP client for the deal submission gateway."""

from __future__ import annotations

import os
from typing import Any

import httpx

GATEWAY_URL = os.environ.get("GATEWAY_URL", "http://localhost:8000/proxy")


def _headers() -> dict[str, str]:
    origin = os.environ.get("GATEWAY_ORIGIN")
    if origin:
        return {"Origin": origin}
    return {}


def submit_deal(payload: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    """Post a deal through the gateway. Gateway error bodies are returned, not raised."""
    resp = httpx.post(GATEWAY_URL, json=payload, headers=_headers(), timeout=30)
    try:
        body = resp.json()
    except ValueError:
        body = {"error": "Non-JSON response from gateway", "raw": resp.text}
    return resp.status_code, body
