from __future__ import annotations

from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request, Response

from app.gateway.config import GatewayConfig
from app.gateway.handler import handle
from app.gateway.models import InboundRequest

router = APIRouter(tags=["proxy"])

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def get_config() -> GatewayConfig:
    """Fresh configuration for every request."""
    return GatewayConfig.from_env()


def get_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Outbound transport; ``None`` lets httpx open real connections."""
    return None


@router.api_route("/proxy", methods=ALL_METHODS)
async def proxy_deal(
    request: Request,
    config: GatewayConfig = Depends(get_config),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_transport),
) -> Response:
    """Validate a deal submission and forward it to the n8n webhook."""
    raw = await request.body()
    inbound = InboundRequest(
        method=request.method,
        headers=dict(request.headers),
        body=raw or None,
    )
    result = await handle(inbound, config, transport=transport)
    return Response(content=result.body, status_code=result.status_code, headers=result.headers)
