from __future__ import annotations

import asyncio
import logging

import stripe

from src.core.subscriptions.errors import TransientProviderError

logger = logging.getLogger(__name__)

_TRANSIENT_STRIPE_ERRORS = (
    stripe.APIConnectionError,
    stripe.RateLimitError,
    stripe.APIError,
)


class StripeSubscriptionLookup:
    """Fetches subscription metadata for invoices that arrive without tenant linkage."""

    def __init__(
        self,
        api_key: str,
        timeout_seconds: int = 8,
        http_client: stripe.HTTPClient | None = None,
    ) -> None:
        self._client = stripe.StripeClient(
            api_key,
            http_client=http_client or stripe.RequestsClient(timeout=timeout_seconds),
        )

    def fetch_metadata(self, subscription_id: str) -> dict[str, str]:
        subscription = self._client.v1.subscriptions.retrieve(subscription_id)
        # StripeObject is not a dict; nested objects are read as attributes.
        metadata = getattr(subscription, "metadata", None)
        if metadata is None:
            return {}
        return {str(key): str(value) for key, value in metadata.to_dict().items()}

    async def metadata_for(self, subscription_id: str) -> dict[str, str]:
        try:
            return await asyncio.to_thread(self.fetch_metadata, subscription_id)
        except _TRANSIENT_STRIPE_ERRORS as exc:
            raise TransientProviderError(f"Stripe subscription lookup failed: {exc}") from exc
        except stripe.StripeError as exc:
            logger.warning("Stripe subscription %s could not be retrieved: %s", subscription_id, exc)
            return {}
