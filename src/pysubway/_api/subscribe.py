"""Email subscription endpoint.

Endpoints:
  - POST /api/subscribe
"""

from __future__ import annotations

from pysubway._api._common import validate_model
from pysubway._transport import Transport
from pysubway.models.subscription import SubscriptionRequest, SubscriptionResponse


async def subscribe(transport: Transport, email: str, line: str) -> SubscriptionResponse:
    endpoint = "/api/subscribe"
    request = SubscriptionRequest(email=email, line=line)
    payload = await transport.post_json(endpoint, request.model_dump())
    return validate_model(endpoint, SubscriptionResponse, payload)
