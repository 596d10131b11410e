"""Typed Stripe webhook events.

Stripe delivers loosely shaped JSON. ``parse_event`` validates the envelope and the
event object against strict pydantic models, then hands back one of a small set of
frozen dataclasses. Any shape it does not expect raises ``MalformedPayloadError``,
so downstream code never touches raw nested dicts.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from src.core.subscriptions.errors import MalformedPayloadError

INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
SUBSCRIPTION_UPDATED = "customer.subscription.updated"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"

TENANT_METADATA_KEYS = ("organization_id", "tenant_id")


@dataclass(frozen=True, slots=True)
class InvoicePaymentSucceeded:
    type: ClassVar[str] = INVOICE_PAYMENT_SUCCEEDED

    event_id: str | None
    invoice_id: str | None
    subscription_id: str | None
    customer_id: str | None
    metadata: dict[str, str] = field(default_factory=dict)
    reported_status: str | None = None


@dataclass(frozen=True, slots=True)
class SubscriptionUpdated:
    type: ClassVar[str] = SUBSCRIPTION_UPDATED

    event_id: str | None
    subscription_id: str
    customer_id: str | None
    status: str
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SubscriptionDeleted:
    type: ClassVar[str] = SUBSCRIPTION_DELETED

    event_id: str | None
    subscription_id: str
    customer_id: str | None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class IgnoredEvent:
    event_id: str | None
    type: str


SubscriptionEvent = InvoicePaymentSucceeded | SubscriptionUpdated | SubscriptionDeleted
ParsedEvent = SubscriptionEvent | IgnoredEvent


def tenant_reference(metadata: dict[str, str]) -> str | None:
    for key in TENANT_METADATA_KEYS:
        value = metadata.get(key, "").strip()
        if value:
            return value
    return None


class _StripePayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class _ExpandedObject(_StripePayload):
    id: str = Field(min_length=1, strict=True)


# Stripe references are ids unless the sender expanded them into objects.
_Reference = StrictStr | _ExpandedObject | None


def _reference_id(value: _Reference) -> str | None:
    if isinstance(value, _ExpandedObject):
        return value.id
    return value


class _EventData(_StripePayload):
    object: dict[str, Any]


class _EventEnvelope(_StripePayload):
    id: StrictStr | None = None
    type: str = Field(min_length=1, strict=True)
    data: _EventData


class _SubscriptionObject(_StripePayload):
    id: str = Field(min_length=1, strict=True)
    customer: _Reference = None
    status: StrictStr | None = None
    metadata: dict[StrictStr, StrictStr] | None = None


class _UpdatedSubscriptionObject(_SubscriptionObject):
    status: str = Field(min_length=1, strict=True)


class _SubscriptionDetails(_StripePayload):
    subscription: _Reference = None
    metadata: dict[StrictStr, StrictStr] | None = None


class _InvoiceParent(_StripePayload):
    subscription_details: _SubscriptionDetails | None = None


class _InvoiceObject(_StripePayload):
    id: StrictStr | None = None
    status: StrictStr | None = None
    customer: _Reference = None
    subscription: _Reference = None
    metadata: dict[StrictStr, StrictStr] | None = None
    subscription_details: _SubscriptionDetails | None = None
    parent: _InvoiceParent | None = None


def _malformed(exc: ValidationError) -> MalformedPayloadError:
    error = exc.errors()[0]
    if error["type"] == "json_invalid":
        return MalformedPayloadError("Webhook body is not valid JSON")
    location = ".".join(str(part) for part in error["loc"])
    if not location:
        return MalformedPayloadError(f"Webhook body is invalid: {error['msg']}")
    if error["type"] == "missing":
        return MalformedPayloadError(f"Field '{location}' is required")
    return MalformedPayloadError(f"Field '{location}' is invalid: {error['msg']}")


def _parse_invoice(event_id: str | None, obj: dict[str, Any]) -> InvoicePaymentSucceeded:
    invoice = _InvoiceObject.model_validate(obj)
    parent_details = invoice.parent.subscription_details if invoice.parent else None

    metadata: dict[str, str] = {}
    for source in (invoice, invoice.subscription_details, parent_details):
        if source is None:
            continue
        for key, value in (source.metadata or {}).items():
            metadata.setdefault(key, value)

    subscription_id = _reference_id(invoice.subscription)
    if not subscription_id and parent_details is not None:
        subscription_id = _reference_id(parent_details.subscription)

    return InvoicePaymentSucceeded(
        event_id=event_id,
        invoice_id=invoice.id,
        subscription_id=subscription_id,
        customer_id=_reference_id(invoice.customer),
        metadata=metadata,
        reported_status=invoice.status,
    )


def _parse_subscription_updated(event_id: str | None, obj: dict[str, Any]) -> SubscriptionUpdated:
    subscription = _UpdatedSubscriptionObject.model_validate(obj)
    return SubscriptionUpdated(
        event_id=event_id,
        subscription_id=subscription.id,
        customer_id=_reference_id(subscription.customer),
        status=subscription.status,
        metadata=dict(subscription.metadata or {}),
    )


def _parse_subscription_deleted(event_id: str | None, obj: dict[str, Any]) -> SubscriptionDeleted:
    subscription = _SubscriptionObject.model_validate(obj)
    return SubscriptionDeleted(
        event_id=event_id,
        subscription_id=subscription.id,
        customer_id=_reference_id(subscription.customer),
        metadata=dict(subscription.metadata or {}),
    )


_PARSERS: dict[str, Callable[[str | None, dict[str, Any]], SubscriptionEvent]] = {
    INVOICE_PAYMENT_SUCCEEDED: _parse_invoice,
    SUBSCRIPTION_UPDATED: _parse_subscription_updated,
    SUBSCRIPTION_DELETED: _parse_subscription_deleted,
}


def parse_event(payload: str | bytes) -> ParsedEvent:
    try:
        envelope = _EventEnvelope.model_validate_json(payload)
    except ValidationError as exc:
        raise _malformed(exc) from exc

    parser = _PARSERS.get(envelope.type)
    if parser is None:
        return IgnoredEvent(event_id=envelope.id, type=envelope.type)
    try:
        return parser(envelope.id, envelope.data.object)
    except ValidationError as exc:
        raise _malformed(exc) from exc
