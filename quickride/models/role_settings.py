"""Per-role listing prices and subscriber counters."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from quickride.models.base import Base


class RolePrice(Base):
    """Subscription price for a business role; independent of share pricing."""

    __tablename__ = "role_prices"

    business_role: Mapped[str] = mapped_column(String(32), primary_key=True)
    price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=350)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class SubscriberCount(Base):
    """Informational subscriber counter per business role."""

    __tablename__ = "subscriber_counts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    business_role: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


__all__ = ["RolePrice", "SubscriberCount"]
