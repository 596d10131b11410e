from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import TimestampedBase


class Organization(TimestampedBase):
    """A clinic tenant and its subscription record."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, index=True)
    subscription_status: Mapped[str] = mapped_column(String(20), nullable=False, default="trial")
    plan_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    stripe_subscription_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    stripe_customer_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
