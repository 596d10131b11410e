from __future__ import annotations

import asyncio
import hashlib
import hmac
import json
import time
from uuid import UUID

from src.core.subscriptions.status import SubscriptionStatus

WEBHOOK_SECRET = "whsec_test_secret"


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    ts = int(time.time()) if timestamp is None else timestamp
    digest = hmac.new(secret.encode("utf-8"), f"{ts}.".encode("utf-8") + payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


def build_event(event_type: str, obj: dict, event_id: str = "evt_1") -> bytes:
    return json.dumps(
        {
            "id": event_id,
            "object": "event",
            "type": event_type,
            "data": {"object": obj},
        }
    ).encode("utf-8")


def subscription_object(
    tenant_id: UUID | str | None,
    *,
    status: str = "active",
    subscription_id: str = "sub_1",
    customer_id: str | None = "cus_1",
) -> dict:
    metadata = {} if tenant_id is None else {"organization_id": str(tenant_id)}
    return {
        "id": subscription_id,
        "object": "subscription",
        "customer": customer_id,
        "status": status,
        "metadata": metadata,
    }


class InMemoryStatusStore:
    """Organization rows keyed by id, written with the same set-once rules as the SQL store."""

    def __init__(self, *organization_ids: UUID) -> None:
        self.rows: dict[UUID, dict] = {
            org_id: {
                "subscription_status": SubscriptionStatus.TRIAL.value,
                "stripe_subscription_id": None,
                "stripe_customer_id": None,
            }
            for org_id in organization_ids
        }
        self.writes: list[tuple[UUID, SubscriptionStatus]] = []
        self.error: Exception | None = None

    async def apply_subscription_status(
        self,
        organization_id: UUID,
        status: SubscriptionStatus,
        *,
        subscription_id: str | None = None,
        customer_id: str | None = None,
    ) -> bool:
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        self.writes.append((organization_id, status))
        row = self.rows.get(organization_id)
        if row is None:
            return False
        row["subscription_status"] = status.value
        row["stripe_subscription_id"] = row["stripe_subscription_id"] or subscription_id
        row["stripe_customer_id"] = row["stripe_customer_id"] or customer_id
        return True
