from __future__ import annotations

from pydantic import BaseModel, Field


class BillingWebhookResponse(BaseModel):
    received: bool
    event_type: str
    tenant_id: str | None = None
    updated: bool


class CheckoutRequest(BaseModel):
    price_id: str = Field(min_length=3, max_length=255)


class CheckoutResponse(BaseModel):
    url: str
