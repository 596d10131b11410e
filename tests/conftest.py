from __future__ import annotations

from uuid import UUID

import pytest

from src.core.subscriptions.synchronizer import SubscriptionStatusSynchronizer
from tests.factories import WEBHOOK_SECRET, InMemoryStatusStore


@pytest.fixture
def tenant_id() -> UUID:
    return UUID("7d0e2a4b-9a35-4f7e-8a53-0c1a5f3b2e11")


@pytest.fixture
def store(tenant_id: UUID) -> InMemoryStatusStore:
    return InMemoryStatusStore(tenant_id)


@pytest.fixture
def synchronizer(store: InMemoryStatusStore) -> SubscriptionStatusSynchronizer:
    return SubscriptionStatusSynchronizer(store, webhook_secret=WEBHOOK_SECRET)
