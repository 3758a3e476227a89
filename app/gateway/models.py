from __future__ import annotations

import base64
import json
from enum import StrEnum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS: tuple[str, ...] = ("dealer", "customer", "amount", "dealDate", "status")


class InboundRequest(BaseModel):
    """One inbound HTTP request, scoped to a single invocation."""

    method: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[str | bytes] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("method")
    @classmethod
    def normalise_method(cls, v: str) -> str:
        return v.strip().upper()

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def origin(self) -> Optional[str]:
        return self.header("origin") or None

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> InboundRequest:
        """Build a request from a Netlify/Lambda style event dict."""
        body = event.get("body")
        if body and event.get("isBase64Encoded"):
            # Raises binascii.Error on malformed input; UTF-8 is checked when parsed.
            body = base64.b64decode(body, validate=True)
        headers = event.get("headers") or {}
        return cls(
            method=event.get("httpMethod") or "",
            headers={str(k): str(v) for k, v in headers.items() if v is not None},
            body=body,
        )


class DealPayload(BaseModel):
    """The five canonical deal fields. Values are passed through untouched."""

    dealer: Any
    customer: Any
    amount: Any
    deal_date: Any = Field(alias="dealDate")
    status: Any

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    def to_upstream(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class OutboundOutcome(StrEnum):
    SUCCESS = "success"
    UPSTREAM_ERROR = "upstream_error"
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"


class OutboundResult(BaseModel):
    """Tagged result of the single upstream call."""

    outcome: OutboundOutcome
    status: Optional[int] = None
    body: str = ""
    detail: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_status(cls, status: int, body: str) -> OutboundResult:
        outcome = (
            OutboundOutcome.SUCCESS if 200 <= status < 300 else OutboundOutcome.UPSTREAM_ERROR
        )
        return cls(outcome=outcome, status=status, body=body)

    @classmethod
    def timed_out(cls) -> OutboundResult:
        return cls(outcome=OutboundOutcome.TIMEOUT, detail="Upstream request timed out")

    @classmethod
    def transport_failure(cls, exc: BaseException) -> OutboundResult:
        return cls(
            outcome=OutboundOutcome.TRANSPORT_ERROR,
            detail=f"{type(exc).__name__}: {exc}",
        )


class GatewayResponse(BaseModel):
    """The only thing handed back to the caller."""

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def with_json(cls, status_code: int, payload: dict[str, Any], headers: Mapping[str, str]) -> GatewayResponse:
        return cls(
            status_code=status_code,
            headers={**headers, "Content-Type": "application/json"},
            body=json.dumps(payload, separators=(",", ":")),
        )

    @classmethod
    def empty(cls, status_code: int, headers: Mapping[str, str]) -> GatewayResponse:
        return cls(status_code=status_code, headers=dict(headers), body="")

    def to_event(self) -> dict[str, Any]:
        return {"statusCode": self.status_code, "headers": dict(self.headers), "body": self.body}
