from __future__ import annotations

import math
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

DEFAULT_TIMEOUT_MS = 10_000
WILDCARD_ORIGIN = "*"

_TRUTHY = {"1", "true", "yes", "on"}


class GatewayConfig(BaseModel):
    """Per-invocation gateway settings, resolved from the hosting environment."""

    allowed_origin: str = WILDCARD_ORIGIN
    webhook_url: Optional[str] = None
    username: str = ""
    password: str = ""
    timeout_ms: float = DEFAULT_TIMEOUT_MS
    enforce_origin: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def has_credentials(self) -> bool:
        return bool(self.username or self.password)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def is_wildcard(self) -> bool:
        return self.allowed_origin == WILDCARD_ORIGIN

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> GatewayConfig:
        """Read settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        return cls(
            allowed_origin=env.get("ALLOWED_ORIGIN") or WILDCARD_ORIGIN,
            webhook_url=env.get("N8N_WEBHOOK_URL") or None,
            username=env.get("N8N_USER", ""),
            password=env.get("N8N_PASS", ""),
            timeout_ms=parse_timeout_ms(env.get("PROXY_TIMEOUT_MS")),
            enforce_origin=(env.get("ENFORCE_ORIGIN", "").strip().lower() in _TRUTHY),
        )


def parse_timeout_ms(raw: Optional[str]) -> float:
    """Parse PROXY_TIMEOUT_MS. Unset, non-numeric or non-positive values fall back to the default."""
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT_MS
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_MS
    if not math.isfinite(value) or value <= 0:
        return DEFAULT_TIMEOUT_MS
    return value
