"""Email subscription request/response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from pysubway.models._base import SubwayBaseModel


class SubscriptionRequest(BaseModel):
    """Body of ``POST /api/subscribe``. Not retained after submission."""

    model_config = ConfigDict(frozen=True)

    email: str
    line: str


class SubscriptionResponse(SubwayBaseModel):
    message: str = ""
