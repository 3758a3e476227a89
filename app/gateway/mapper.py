from __future__ import annotations

import logging
from typing import Mapping

from app.gateway.models import GatewayResponse, OutboundOutcome, OutboundResult

logger = logging.getLogger(__name__)


def map_result(result: OutboundResult, headers: Mapping[str, str]) -> GatewayResponse:
    """Turn the outcome of the upstream call into the client-facing response."""
    if result.outcome == OutboundOutcome.SUCCESS:
        return GatewayResponse.with_json(
            200,
            {"ok": True, "upstreamStatus": result.status, "upstreamBody": result.body},
            headers,
        )

    if result.outcome == OutboundOutcome.UPSTREAM_ERROR:
        logger.warning("Upstream returned status %s", result.status)
        return GatewayResponse.with_json(
            502,
            {
                "error": "Upstream returned an error",
                "upstreamStatus": result.status,
                "upstreamBody": result.body,
            },
            headers,
        )

    # Timeout and transport failures share a shape; only the detail differs.
    return GatewayResponse.with_json(
        502,
        {"error": "Proxy failed", "detail": result.detail or "Upstream request failed"},
        headers,
    )
