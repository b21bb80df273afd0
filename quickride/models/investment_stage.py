"""Investment stage ORM model."""
from __future__ import annotations

import enum
from decimal import Decimal

from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from quickride.models.base import Base


class StageStatus(str, enum.Enum):
    UPCOMING = "UPCOMING"
    RUNNING = "RUNNING"
    SOLD_OUT = "SOLD_OUT"


class InvestmentStage(Base):
    """Price tier applicable to new share purchases."""

    __tablename__ = "investment_stages"
    __table_args__ = (
        # At most one stage may be RUNNING at a time.
        Index(
            "uq_investment_stages_running",
            "status",
            unique=True,
            sqlite_where=text("status = 'RUNNING'"),
            postgresql_where=text("status = 'RUNNING'"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    stage: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    price_per_share: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    min_subscribers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_subscribers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[StageStatus] = mapped_column(
        SAEnum(StageStatus, name="stage_status"), nullable=False, default=StageStatus.UPCOMING
    )
    shares_available: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


__all__ = ["InvestmentStage", "StageStatus"]
