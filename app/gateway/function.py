"""Serverless entry point for Netlify/Lambda style hosts."""

from __future__ import annotations

import asyncio
import binascii
import logging
from typing import Any, Mapping, Optional

from app.gateway.config import GatewayConfig
from app.gateway.cors import cors_headers
from app.gateway.errors import InternalError, InvalidBody
from app.gateway.handler import handle
from app.gateway.models import InboundRequest

logger = logging.getLogger(__name__)


def handler(event: Mapping[str, Any], context: Optional[Any] = None) -> dict[str, Any]:
    config = GatewayConfig.from_env()
    try:
        request = InboundRequest.from_event(event)
    except binascii.Error as exc:
        logger.warning("Rejected body with malformed base64: %s", exc)
        headers_only = InboundRequest.from_event({**event, "body": None})
        return InvalidBody().to_response(cors_headers(config, headers_only.origin)).to_event()
    except Exception:
        logger.exception("Could not decode inbound event")
        return InternalError().to_response(cors_headers(config, None)).to_event()

    headers = cors_headers(config, request.origin)
    pipeline = handle(request, config)
    try:
        response = asyncio.run(pipeline)
    except RuntimeError:
        # asyncio.run refuses to start inside an already running event loop.
        pipeline.close()
        logger.exception("Could not run gateway pipeline")
        return InternalError().to_response(headers).to_event()
    return response.to_event()
