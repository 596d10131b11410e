"""Stripe subscription lifecycle -> organization subscription status.

Each delivery is verified, parsed, mapped and applied as one unconditional
status write. Events are applied in processing order with no staleness check, so
a late duplicate can overwrite a newer status until the next event arrives. There
is no event-id ledger either: the single-row write is naturally idempotent, which
stops being true if side effects are ever added here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

import stripe

from src.core.subscriptions.errors import (
    AuthenticationError,
    MalformedPayloadError,
    UnresolvableTenantError,
    UnsupportedStatusError,
)
from src.core.subscriptions.events import (
    IgnoredEvent,
    InvoicePaymentSucceeded,
    SubscriptionDeleted,
    SubscriptionEvent,
    parse_event,
    tenant_reference,
)
from src.core.subscriptions.status import SubscriptionStatus, map_provider_status

logger = logging.getLogger(__name__)


class SubscriptionStatusStore(Protocol):
    async def apply_subscription_status(
        self,
        organization_id: UUID,
        status: SubscriptionStatus,
        *,
        subscription_id: str | None = None,
        customer_id: str | None = None,
    ) -> bool: ...


class SubscriptionMetadataLookup(Protocol):
    async def metadata_for(self, subscription_id: str) -> dict[str, str]: ...


@dataclass(frozen=True, slots=True)
class Ack:
    event_type: str
    tenant_id: UUID | None = None
    status: SubscriptionStatus | None = None
    updated: bool = False
    reason: str | None = None


def resolve_internal_status(event: SubscriptionEvent) -> SubscriptionStatus:
    if isinstance(event, InvoicePaymentSucceeded):
        return SubscriptionStatus.ACTIVE
    if isinstance(event, SubscriptionDeleted):
        return SubscriptionStatus.CANCELED
    return map_provider_status(event.status)


class SubscriptionStatusSynchronizer:
    def __init__(
        self,
        store: SubscriptionStatusStore,
        *,
        webhook_secret: str,
        tolerance_seconds: int = 300,
        lookup: SubscriptionMetadataLookup | None = None,
    ) -> None:
        if not webhook_secret:
            raise ValueError("webhook_secret is required")
        self._store = store
        self._webhook_secret = webhook_secret
        self._tolerance_seconds = tolerance_seconds
        self._lookup = lookup

    def verify(self, raw_payload: bytes, signature_header: str | None) -> str:
        if not signature_header:
            raise AuthenticationError("Missing Stripe-Signature header")

        try:
            payload = raw_payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedPayloadError("Webhook body is not valid UTF-8") from exc

        try:
            stripe.WebhookSignature.verify_header(
                payload,
                signature_header,
                self._webhook_secret,
                self._tolerance_seconds,
            )
        except stripe.SignatureVerificationError as exc:
            logger.warning("Rejected webhook with invalid signature: %s", exc)
            raise AuthenticationError(f"Invalid Stripe signature: {exc}") from exc
        return payload

    async def handle_event(self, raw_payload: bytes, signature_header: str | None) -> Ack:
        event = parse_event(self.verify(raw_payload, signature_header))

        if isinstance(event, IgnoredEvent):
            logger.debug("Ignoring Stripe event %s of type %s", event.event_id, event.type)
            return Ack(event_type=event.type, reason="ignored_event_type")

        try:
            tenant_id = await self._resolve_tenant(event)
        except UnresolvableTenantError as exc:
            logger.warning("Stripe event %s (%s) has no usable tenant linkage: %s", event.event_id, event.type, exc)
            return Ack(event_type=event.type, reason="unresolvable_tenant")

        try:
            status = resolve_internal_status(event)
        except UnsupportedStatusError as exc:
            logger.warning(
                "Stripe event %s (%s) dropped: %s",
                event.event_id,
                event.type,
                exc,
            )
            return Ack(event_type=event.type, tenant_id=tenant_id, reason="unsupported_status")

        updated = await self._store.apply_subscription_status(
            tenant_id,
            status,
            subscription_id=event.subscription_id,
            customer_id=event.customer_id,
        )
        if not updated:
            logger.warning("Stripe event %s references unknown organization %s", event.event_id, tenant_id)
            return Ack(event_type=event.type, tenant_id=tenant_id, status=status, reason="unknown_tenant")

        logger.info(
            "Organization %s subscription status set to %s by %s (%s)",
            tenant_id,
            status.value,
            event.type,
            event.event_id,
        )
        return Ack(event_type=event.type, tenant_id=tenant_id, status=status, updated=True)

    async def _resolve_tenant(self, event: SubscriptionEvent) -> UUID:
        reference = tenant_reference(event.metadata)
        if (
            reference is None
            and isinstance(event, InvoicePaymentSucceeded)
            and event.subscription_id
            and self._lookup is not None
        ):
            reference = tenant_reference(await self._lookup.metadata_for(event.subscription_id))

        if reference is None:
            raise UnresolvableTenantError("no organization_id in metadata")
        try:
            return UUID(reference)
        except ValueError:
            raise UnresolvableTenantError(f"organization_id {reference!r} is not a UUID") from None
