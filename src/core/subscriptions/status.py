from __future__ import annotations

import enum
from typing import Final

from src.core.subscriptions.errors import UnsupportedStatusError


class SubscriptionStatus(str, enum.Enum):
    """Internal subscription status stored on an organization."""

    TRIAL = "trial"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    INCOMPLETE = "incomplete"


PROVIDER_STATUS_MAP: Final[dict[str, SubscriptionStatus]] = {
    "trialing": SubscriptionStatus.TRIAL,
    "active": SubscriptionStatus.ACTIVE,
    "past_due": SubscriptionStatus.PAST_DUE,
    "unpaid": SubscriptionStatus.PAST_DUE,
    "canceled": SubscriptionStatus.CANCELED,
    "incomplete": SubscriptionStatus.INCOMPLETE,
    "incomplete_expired": SubscriptionStatus.INCOMPLETE,
}

ACCESS_ALLOWED_STATUSES: Final[frozenset[SubscriptionStatus]] = frozenset(
    {SubscriptionStatus.TRIAL, SubscriptionStatus.ACTIVE}
)


def map_provider_status(provider_status: str) -> SubscriptionStatus:
    # Exact match only: Stripe statuses are lowercase identifiers.
    try:
        return PROVIDER_STATUS_MAP[provider_status]
    except KeyError:
        raise UnsupportedStatusError(provider_status) from None


def is_access_allowed(status: str | SubscriptionStatus | None) -> bool:
    if status is None:
        return False
    try:
        return SubscriptionStatus(status) in ACCESS_ALLOWED_STATUSES
    except ValueError:
        return False
