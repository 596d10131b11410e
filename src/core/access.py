from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth import AuthContext, require_auth_context
from src.core.db import get_db_session
from src.core.repositories.organizations import OrganizationRepository
from src.core.subscriptions.status import is_access_allowed


@dataclass(slots=True)
class AccessDecision:
    organization_id: UUID
    subscription_status: str
    plan_type: str | None
    allowed: bool


async def evaluate_access(organization_id: UUID, session: AsyncSession) -> AccessDecision:
    organization = await OrganizationRepository(session).get(organization_id)
    if organization is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Organization not found",
        )

    return AccessDecision(
        organization_id=organization.id,
        subscription_status=organization.subscription_status,
        plan_type=organization.plan_type,
        allowed=is_access_allowed(organization.subscription_status),
    )


async def get_access_decision(
    context: AuthContext = Depends(require_auth_context),
    session: AsyncSession = Depends(get_db_session),
) -> AccessDecision:
    return await evaluate_access(context.organization_id, session)


async def require_active_organization(
    decision: AccessDecision = Depends(get_access_decision),
) -> AccessDecision:
    if not decision.allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Organization access is suspended. Contact the administrator.",
        )
    return decision
