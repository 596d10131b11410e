from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.subscriptions.errors import TransientStoreError
from src.core.subscriptions.status import SubscriptionStatus
from src.models.base import utcnow
from src.models.organization import Organization
from src.models.profile import Profile

logger = logging.getLogger(__name__)

_TRANSIENT_DB_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


class OrganizationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, organization_id: UUID) -> Organization | None:
        return await self.session.scalar(select(Organization).where(Organization.id == organization_id))

    async def get_profile(self, user_id: UUID) -> Profile | None:
        return await self.session.scalar(select(Profile).where(Profile.id == user_id))

    async def apply_subscription_status(
        self,
        organization_id: UUID,
        status: SubscriptionStatus,
        *,
        subscription_id: str | None = None,
        customer_id: str | None = None,
    ) -> bool:
        """Write ``status`` in a single UPDATE and return whether the row exists.

        Provider ids are set-once: COALESCE keeps whatever is already stored.
        """
        stmt = (
            update(Organization)
            .where(Organization.id == organization_id)
            .values(
                subscription_status=status.value,
                stripe_subscription_id=func.coalesce(Organization.stripe_subscription_id, subscription_id),
                stripe_customer_id=func.coalesce(Organization.stripe_customer_id, customer_id),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except _TRANSIENT_DB_ERRORS as exc:
            await self.session.rollback()
            logger.exception("Subscription status write failed for organization %s", organization_id)
            raise TransientStoreError("Tenant store is temporarily unavailable") from exc

        return (result.rowcount or 0) > 0
