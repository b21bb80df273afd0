"""Shareholder ORM model."""
from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum as SAEnum
from sqlalchemy import Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickride.models.base import Base, TimestampMixin


class BusinessRole(str, enum.Enum):
    DRIVER = "DRIVER"
    TRAVEL_AGENT = "TRAVEL_AGENT"
    SHOPS_HOTELS = "SHOPS_HOTELS"
    ADMIN = "ADMIN"


SUBSCRIBER_ROLES: tuple[BusinessRole, ...] = (
    BusinessRole.DRIVER,
    BusinessRole.TRAVEL_AGENT,
    BusinessRole.SHOPS_HOTELS,
)


class ShareholderStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Shareholder(TimestampMixin, Base):
    """Registered investor together with the terms fixed at registration."""

    __tablename__ = "shareholders"
    __table_args__ = (Index("ix_shareholders_status", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    father_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    address: Mapped[str] = mapped_column(Text, nullable=False)
    pin_code: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    business_role: Mapped[BusinessRole] = mapped_column(
        SAEnum(BusinessRole, name="business_role"), nullable=False, default=BusinessRole.DRIVER
    )
    num_shares: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    username: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    photo_data: Mapped[str | None] = mapped_column(Text)
    signature_data: Mapped[str | None] = mapped_column(Text)
    price_per_share: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    total_investment: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    stage: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[ShareholderStatus] = mapped_column(
        SAEnum(ShareholderStatus, name="shareholder_status"),
        nullable=False,
        default=ShareholderStatus.PENDING,
    )
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    dividends = relationship(
        "DividendRecord",
        back_populates="shareholder",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.business_role == BusinessRole.ADMIN

    @property
    def agreement_id(self) -> str:
        return f"QR-{self.id:05d}"


__all__ = ["BusinessRole", "SUBSCRIBER_ROLES", "Shareholder", "ShareholderStatus"]
