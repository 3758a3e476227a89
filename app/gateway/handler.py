from __future__ import annotations

import logging
from typing import Optional

import httpx

from app.gateway.config import GatewayConfig
from app.gateway.cors import cors_headers
from app.gateway.errors import GatewayError, InternalError
from app.gateway.forwarder import forward
from app.gateway.gate import check_method
from app.gateway.mapper import map_result
from app.gateway.models import GatewayResponse, InboundRequest
from app.gateway.validator import validate_payload

logger = logging.getLogger(__name__)


async def handle(
    request: InboundRequest,
    config: GatewayConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> GatewayResponse:
    """Run one submission through gate → validate → forward → map. Never raises."""
    headers = cors_headers(config, request.origin)
    try:
        preflight = check_method(request, headers)
        if preflight is not None:
            return preflight

        payload = validate_payload(request.body, config, request.origin)
        result = await forward(payload, config, transport=transport)
        return map_result(result, headers)

    except GatewayError as exc:
        return exc.to_response(headers)
    except Exception:
        logger.exception("Unexpected gateway failure")
        return InternalError().to_response(headers)
