from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.db import get_db_session
from src.core.repositories.organizations import OrganizationRepository
from src.core.subscriptions.lookup import StripeSubscriptionLookup
from src.core.subscriptions.synchronizer import SubscriptionStatusSynchronizer
from src.schemas.billing import BillingWebhookResponse

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def get_subscription_synchronizer(
    session: AsyncSession = Depends(get_db_session),
) -> SubscriptionStatusSynchronizer:
    if not settings.stripe_webhook_secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="STRIPE_WEBHOOK_SECRET is not configured",
        )

    lookup = None
    if settings.stripe_secret_key:
        lookup = StripeSubscriptionLookup(
            settings.stripe_secret_key,
            timeout_seconds=settings.stripe_lookup_timeout_seconds,
        )

    return SubscriptionStatusSynchronizer(
        OrganizationRepository(session),
        webhook_secret=settings.stripe_webhook_secret,
        tolerance_seconds=settings.stripe_webhook_tolerance_seconds,
        lookup=lookup,
    )


@router.post("/stripe", response_model=BillingWebhookResponse)
async def stripe_webhook(
    request: Request,
    synchronizer: SubscriptionStatusSynchronizer = Depends(get_subscription_synchronizer),
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
) -> BillingWebhookResponse:
    # Signatures cover the exact bytes, so the body is never re-serialized first.
    raw_body = await request.body()
    ack = await synchronizer.handle_event(raw_body, stripe_signature)
    return BillingWebhookResponse(
        received=True,
        event_type=ack.event_type,
        tenant_id=str(ack.tenant_id) if ack.tenant_id else None,
        updated=ack.updated,
    )
