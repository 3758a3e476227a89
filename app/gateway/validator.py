from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from app.gateway.config import GatewayConfig
from app.gateway.errors import ForbiddenOrigin, InvalidBody, MissingFields
from app.gateway.models import REQUIRED_FIELDS, DealPayload

logger = logging.getLogger(__name__)


def parse_body(raw: Optional[str | bytes]) -> dict[str, Any]:
    """Parse the request body. An absent or blank body is an empty object.

    Raw bytes must be UTF-8; anything else is rejected like malformed JSON.
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
    except UnicodeDecodeError as exc:
        logger.warning("Rejected body that is not valid UTF-8: %s", exc)
        raise InvalidBody() from exc
    if text is None or not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Rejected unparseable body: %s", exc)
        raise InvalidBody() from exc
    if not isinstance(data, dict):
        logger.warning("Rejected non-object body of type %s", type(data).__name__)
        raise InvalidBody()
    return data


def is_present(value: Any) -> bool:
    """A value counts as present unless it is missing, null, false, zero, NaN or empty."""
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and (value == 0 or value != value):
        return False
    if isinstance(value, (str, list, dict)) and len(value) == 0:
        return False
    return True


def missing_fields(data: Mapping[str, Any]) -> list[str]:
    return [name for name in REQUIRED_FIELDS if not is_present(data.get(name))]


def check_origin(config: GatewayConfig, origin: Optional[str]) -> None:
    """Reject a mismatched Origin when enforcement is switched on for a fixed origin."""
    if not config.enforce_origin or config.is_wildcard or not origin:
        return
    if origin != config.allowed_origin:
        logger.warning("Rejected request from origin %s", origin)
        raise ForbiddenOrigin()


def validate_payload(raw: Optional[str | bytes], config: GatewayConfig, origin: Optional[str]) -> DealPayload:
    """Parse and check a submission, returning only the canonical deal fields."""
    data = parse_body(raw)
    missing = missing_fields(data)
    if missing:
        logger.warning("Rejected submission missing fields: %s", ", ".join(missing))
        raise MissingFields(required=REQUIRED_FIELDS, missing=missing)
    check_origin(config, origin)
    return DealPayload.model_validate({name: data[name] for name in REQUIRED_FIELDS})
