"""Error taxonomy for the gateway pipeline.

Each error carries the status code and JSON body the caller receives. Upstream
HTTP errors and transport failures are not exceptions; they travel as
``OutboundResult`` values and are mapped in ``app.gateway.mapper``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from app.gateway.models import GatewayResponse


class GatewayError(Exception):
    status_code: int = 500
    message: str = "Server error"

    def __init__(self, message: Optional[str] = None, **extra: Any) -> None:
        self.message = message or self.message
        self.extra = extra
        super().__init__(self.message)

    def body(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}

    def to_response(self, headers: Mapping[str, str]) -> GatewayResponse:
        return GatewayResponse.with_json(self.status_code, self.body(), headers)


# ---------------------------------------------------------------------------
# Client errors (4xx): the caller must fix the request
# ---------------------------------------------------------------------------


class ClientError(GatewayError):
    status_code = 400


class MethodNotAllowed(ClientError):
    status_code = 405
    message = "Method Not Allowed"


class InvalidBody(ClientError):
    message = "Invalid JSON body"


class MissingFields(ClientError):
    message = "Missing required fields"

    def __init__(self, required: Sequence[str], missing: Sequence[str]) -> None:
        super().__init__(required=list(required), missing=list(missing))


class ForbiddenOrigin(ClientError):
    status_code = 403
    message = "Origin not allowed"


# ---------------------------------------------------------------------------
# Server-side errors (5xx)
# ---------------------------------------------------------------------------


class ConfigurationError(GatewayError):
    status_code = 500

    def __init__(self, setting: str) -> None:
        self.setting = setting
        super().__init__(f"Server misconfiguration: missing {setting}")


class InternalError(GatewayError):
    status_code = 500
    message = "Server error"
