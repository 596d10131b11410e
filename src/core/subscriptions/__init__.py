from src.core.subscriptions.errors import (
    AuthenticationError,
    MalformedPayloadError,
    TransientProviderError,
    TransientStoreError,
    UnresolvableTenantError,
    UnsupportedStatusError,
    WebhookRejection,
)
from src.core.subscriptions.events import (
    IgnoredEvent,
    InvoicePaymentSucceeded,
    SubscriptionDeleted,
    SubscriptionUpdated,
    parse_event,
)
from src.core.subscriptions.status import SubscriptionStatus, is_access_allowed, map_provider_status
from src.core.subscriptions.synchronizer import Ack, SubscriptionStatusSynchronizer

__all__ = [
    "Ack",
    "AuthenticationError",
    "IgnoredEvent",
    "InvoicePaymentSucceeded",
    "MalformedPayloadError",
    "SubscriptionDeleted",
    "SubscriptionStatus",
    "SubscriptionStatusSynchronizer",
    "SubscriptionUpdated",
    "TransientProviderError",
    "TransientStoreError",
    "UnresolvableTenantError",
    "UnsupportedStatusError",
    "WebhookRejection",
    "is_access_allowed",
    "map_provider_status",
    "parse_event",
]
