from __future__ import annotations

from pydantic import BaseModel


class OrganizationAccessResponse(BaseModel):
    organization_id: str
    subscription_status: str
    plan_type: str | None = None
    allowed: bool
