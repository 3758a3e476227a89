from __future__ import annotations

import asyncio
import base64
import logging
from typing import Optional

import httpx

from app.gateway.config import GatewayConfig
from app.gateway.errors import ConfigurationError
from app.gateway.models import DealPayload, OutboundResult

logger = logging.getLogger(__name__)

LOG_BODY_LIMIT = 1000


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def build_headers(config: GatewayConfig) -> dict[str, str]:
    """Outbound headers. Credentials come from server-side config only."""
    headers = {"Content-Type": "application/json"}
    if config.has_credentials:
        headers["Authorization"] = basic_auth_header(config.username, config.password)
    return headers


async def _read_text(response: httpx.Response) -> str:
    try:
        await response.aread()
        return response.text
    except (httpx.HTTPError, UnicodeDecodeError) as exc:
        logger.warning("Error reading upstream response body: %s", exc)
        return ""


async def forward(
    payload: DealPayload,
    config: GatewayConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> OutboundResult:
    """Send the deal to the webhook once and describe what happened.

    Upstream 4xx/5xx responses are returned as data. Only a missing webhook URL
    raises; transport failures and timeouts come back as tagged results.
    """
    if not config.webhook_url:
        logger.error("Missing env: N8N_WEBHOOK_URL")
        raise ConfigurationError("N8N_WEBHOOK_URL")

    url = config.webhook_url
    timeout = config.timeout_seconds

    try:
        async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
            async with asyncio.timeout(timeout):
                request = client.build_request(
                    "POST", url, json=payload.to_upstream(), headers=build_headers(config)
                )
                response = await client.send(request, stream=True)
                try:
                    text = await _read_text(response)
                finally:
                    await response.aclose()
    except (TimeoutError, httpx.TimeoutException) as exc:
        logger.error("Upstream request to %s timed out after %sms: %r", url, config.timeout_ms, exc)
        return OutboundResult.timed_out()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("Upstream request to %s failed: %s: %s", url, type(exc).__name__, exc)
        return OutboundResult.transport_failure(exc)

    logger.info(
        "Upstream call: url=%s status=%s body=%s",
        url,
        response.status_code,
        text[:LOG_BODY_LIMIT],
    )
    return OutboundResult.from_status(response.status_code, text)
