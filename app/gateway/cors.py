from __future__ import annotations

from typing import Optional

from app.gateway.config import GatewayConfig

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, x-secret"


def resolve_allowed_origin(config: GatewayConfig, origin: Optional[str]) -> str:
    """Wildcard stays wildcard; otherwise echo the caller's Origin, else the configured one."""
    if config.is_wildcard:
        return "*"
    return origin or config.allowed_origin


def cors_headers(config: GatewayConfig, origin: Optional[str]) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": resolve_allowed_origin(config, origin),
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Credentials": "true",
    }
