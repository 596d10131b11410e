from __future__ import annotations

import pytest

from src.core.subscriptions.errors import UnsupportedStatusError
from src.core.subscriptions.status import SubscriptionStatus, is_access_allowed, map_provider_status


@pytest.mark.parametrize(
    ("provider_status", "expected"),
    [
        ("trialing", SubscriptionStatus.TRIAL),
        ("active", SubscriptionStatus.ACTIVE),
        ("past_due", SubscriptionStatus.PAST_DUE),
        ("unpaid", SubscriptionStatus.PAST_DUE),
        ("canceled", SubscriptionStatus.CANCELED),
        ("incomplete", SubscriptionStatus.INCOMPLETE),
        ("incomplete_expired", SubscriptionStatus.INCOMPLETE),
    ],
)
def test_map_provider_status_table(provider_status: str, expected: SubscriptionStatus) -> None:
    assert map_provider_status(provider_status) is expected


@pytest.mark.parametrize("provider_status", ["paused", "trial", "ACTIVE", ""])
def test_map_provider_status_rejects_unknown_vocabulary(provider_status: str) -> None:
    with pytest.raises(UnsupportedStatusError) as exc:
        map_provider_status(provider_status)
    assert exc.value.provider_status == provider_status


def test_access_allowed_only_for_trial_and_active() -> None:
    assert is_access_allowed("trial") is True
    assert is_access_allowed(SubscriptionStatus.ACTIVE) is True
    assert is_access_allowed("past_due") is False
    assert is_access_allowed("canceled") is False
    assert is_access_allowed("incomplete") is False
    assert is_access_allowed("bogus") is False
    assert is_access_allowed(None) is False
