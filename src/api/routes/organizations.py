from __future__ import annotations

from fastapi import APIRouter, Depends

from src.core.access import AccessDecision, get_access_decision, require_active_organization
from src.schemas.organization import OrganizationAccessResponse

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.get("/current/access", response_model=OrganizationAccessResponse)
async def get_current_access(
    decision: AccessDecision = Depends(get_access_decision),
) -> OrganizationAccessResponse:
    return OrganizationAccessResponse(
        organization_id=str(decision.organization_id),
        subscription_status=decision.subscription_status,
        plan_type=decision.plan_type,
        allowed=decision.allowed,
    )


@router.get("/current/session", response_model=OrganizationAccessResponse)
async def check_session_access(
    decision: AccessDecision = Depends(require_active_organization),
) -> OrganizationAccessResponse:
    return OrganizationAccessResponse(
        organization_id=str(decision.organization_id),
        subscription_status=decision.subscription_status,
        plan_type=decision.plan_type,
        allowed=decision.allowed,
    )
