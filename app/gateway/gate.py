from __future__ import annotations

from typing import Mapping, Optional

from app.gateway.errors import MethodNotAllowed
from app.gateway.models import GatewayResponse, InboundRequest

PREFLIGHT_METHOD = "OPTIONS"
SUBMIT_METHOD = "POST"


def check_method(request: InboundRequest, headers: Mapping[str, str]) -> Optional[GatewayResponse]:
    """Short-circuit preflight and unsupported methods before the body is touched.

    Returns the terminal response for a preflight, raises ``MethodNotAllowed``
    for anything that is not a submission, and returns ``None`` to continue.
    """
    if request.method == PREFLIGHT_METHOD:
        return GatewayResponse.empty(204, headers)
    if request.method != SUBMIT_METHOD:
        raise MethodNotAllowed()
    return None
