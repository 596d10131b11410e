from __future__ import annotations

import asyncio
import logging
from uuid import UUID

import stripe
from fastapi import HTTPException, status

from src.core.auth import AuthContext
from src.core.config import settings

logger = logging.getLogger(__name__)


class StripeCheckoutClient:
    """Creates subscription Checkout Sessions linked to an organization.

    The ``organization_id`` written to ``subscription_data.metadata`` is what the
    webhook synchronizer later reads to find the tenant.
    """

    def __init__(self) -> None:
        if not settings.stripe_secret_key:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="STRIPE_SECRET_KEY is not configured",
            )
        self._client = stripe.StripeClient(settings.stripe_secret_key)

    def create_checkout_url(
        self,
        *,
        price_id: str,
        organization_id: UUID,
        customer_email: str | None,
        origin: str,
    ) -> str:
        params: dict = {
            "mode": "subscription",
            "payment_method_types": ["card"],
            "line_items": [{"price": price_id, "quantity": 1}],
            "success_url": f"{origin}{settings.checkout_success_path}",
            "cancel_url": f"{origin}{settings.checkout_cancel_path}",
            "subscription_data": {"metadata": {"organization_id": str(organization_id)}},
        }
        if customer_email:
            params["customer_email"] = customer_email

        session = self._client.v1.checkout.sessions.create(params=params)
        return session.url


async def create_checkout_session(context: AuthContext, price_id: str, origin: str | None) -> str:
    client = StripeCheckoutClient()
    try:
        return await asyncio.to_thread(
            client.create_checkout_url,
            price_id=price_id,
            organization_id=context.organization_id,
            customer_email=context.email,
            origin=(origin or settings.app_base_url).rstrip("/"),
        )
    except stripe.StripeError as exc:
        logger.exception("Checkout session creation failed for organization %s", context.organization_id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Unable to create checkout session",
        ) from exc
