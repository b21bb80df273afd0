"""Dividend payout ORM model."""
from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, event, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickride.models.base import Base


class DividendStatus(str, enum.Enum):
    PAID = "PAID"


class DividendRecord(Base):
    """Immutable payout event for one shareholder and one reporting month."""

    __tablename__ = "dividend_records"
    __table_args__ = (Index("ix_dividend_records_shareholder_id", "shareholder_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shareholder_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("shareholders.id", ondelete="CASCADE"), nullable=False
    )
    month: Mapped[str] = mapped_column(String(64), nullable=False)
    gross_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    gst_rate: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False, default=0)
    gst_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    net_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(64), nullable=False, default="BANK_TRANSFER")
    status: Mapped[DividendStatus] = mapped_column(
        SAEnum(DividendStatus, name="dividend_status"), nullable=False, default=DividendStatus.PAID
    )
    paid_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    shareholder = relationship("Shareholder", back_populates="dividends")


class ImmutableRecordError(RuntimeError):
    """Raised when code attempts to modify a persisted dividend record."""


@event.listens_for(DividendRecord, "before_update")
def _reject_dividend_update(mapper, connection, target: DividendRecord) -> None:  # type: ignore[no-untyped-def]
    raise ImmutableRecordError(f"Dividend record {target.id} is immutable")


__all__ = ["DividendRecord", "DividendStatus", "ImmutableRecordError"]
