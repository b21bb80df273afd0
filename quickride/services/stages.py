"""Investment stage registry: price tiers and the currently running stage."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quickride.core.errors import DuplicateDecline, ValidationDecline
from quickride.core.money import bounded_amount, round2, to_decimal
from quickride.models import InvestmentStage, StageStatus

logger = logging.getLogger(__name__)

FALLBACK_STAGE_NUMBER = 2
FALLBACK_PRICE_PER_SHARE = Decimal("1200")
FALLBACK_STAGE_NAME = "Current Price"

MUTABLE_STAGE_FIELDS = frozenset(
    {"name", "price_per_share", "status", "shares_available", "min_subscribers", "max_subscribers"}
)


@dataclass(frozen=True, slots=True)
class FoundStage:
    """A RUNNING stage loaded from the store."""

    stage: int
    name: str
    price_per_share: Decimal
    status: StageStatus
    shares_available: int
    min_subscribers: int
    max_subscribers: int

    @classmethod
    def from_model(cls, model: InvestmentStage) -> "FoundStage":
        return cls(
            stage=model.stage,
            name=model.name,
            price_per_share=to_decimal(model.price_per_share),
            status=model.status,
            shares_available=model.shares_available,
            min_subscribers=model.min_subscribers,
            max_subscribers=model.max_subscribers,
        )

    def as_dict(self) -> dict[str, Any]:
        return {"stage": self.stage, "name": self.name, "price_per_share": self.price_per_share}


@dataclass(frozen=True, slots=True)
class FallbackStage:
    """Defaults used when no stage is RUNNING."""

    stage: int = FALLBACK_STAGE_NUMBER
    name: str = FALLBACK_STAGE_NAME
    price_per_share: Decimal = FALLBACK_PRICE_PER_SHARE

    def as_dict(self) -> dict[str, Any]:
        return {"stage": self.stage, "name": self.name, "price_per_share": self.price_per_share}


RunningStage = Union[FoundStage, FallbackStage]


class StageRegistry:
    """Reads and maintains the ordered set of investment stages."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_running_stage(self) -> RunningStage:
        statement = (
            select(InvestmentStage)
            .where(InvestmentStage.status == StageStatus.RUNNING)
            .order_by(InvestmentStage.stage)
        )
        running = self._session.scalars(statement).first()
        if running is None:
            logger.info("no RUNNING investment stage; using fallback stage %s", FALLBACK_STAGE_NUMBER)
            return FallbackStage()
        return FoundStage.from_model(running)

    def list_stages(self) -> list[InvestmentStage]:
        statement = select(InvestmentStage).order_by(InvestmentStage.stage)
        return list(self._session.scalars(statement).all())

    def get_stage(self, stage_number: int) -> InvestmentStage | None:
        statement = select(InvestmentStage).where(InvestmentStage.stage == stage_number)
        return self._session.scalars(statement).one_or_none()

    def applicable_stage(self, total_subscribers: int) -> InvestmentStage | None:
        """Return the stage whose ``[min, max)`` subscriber range contains the count."""

        statement = (
            select(InvestmentStage)
            .where(
                InvestmentStage.min_subscribers <= total_subscribers,
                InvestmentStage.max_subscribers > total_subscribers,
            )
            .order_by(InvestmentStage.stage)
        )
        return self._session.scalars(statement).first()

    def upsert_stage(self, stage_number: int | None, fields: dict[str, Any]) -> InvestmentStage:
        """Create a stage or apply a partial update to an existing one."""

        if stage_number is None:
            raise ValidationDecline("Stage number is required")
        unknown = set(fields) - MUTABLE_STAGE_FIELDS
        if unknown:
            raise ValidationDecline(f"Unsupported stage fields: {', '.join(sorted(unknown))}")
        values = {key: value for key, value in fields.items() if value is not None}

        stage = self.get_stage(stage_number)
        if stage is None:
            stage = self._create(stage_number, values)
        else:
            if not values:
                raise ValidationDecline("No fields supplied to update")
            self._apply(stage, values)

        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateDecline(
                "Another stage is already RUNNING; mark it SOLD_OUT or UPCOMING first",
                reason="running_stage_conflict",
            ) from exc
        self._session.refresh(stage)
        logger.info("investment stage %s saved with %s", stage_number, sorted(values))
        return stage

    def _create(self, stage_number: int, values: dict[str, Any]) -> InvestmentStage:
        name = values.get("name")
        price = values.get("price_per_share")
        if not name or price is None:
            raise ValidationDecline("Stage number, name and price per share are required")
        stage = InvestmentStage(
            stage=stage_number,
            name=name,
            price_per_share=self._validated_price(price),
            min_subscribers=int(values.get("min_subscribers", 0)),
            max_subscribers=int(values.get("max_subscribers", 0)),
            status=StageStatus(values.get("status", StageStatus.UPCOMING)),
            shares_available=int(values.get("shares_available", 0)),
        )
        self._session.add(stage)
        return stage

    def _apply(self, stage: InvestmentStage, values: dict[str, Any]) -> None:
        validated = dict(values)
        if "price_per_share" in validated:
            validated["price_per_share"] = self._validated_price(validated["price_per_share"])
        if "status" in validated:
            validated["status"] = StageStatus(validated["status"])
        for field_name, value in validated.items():
            setattr(stage, field_name, value)

    @staticmethod
    def _validated_price(value: Any) -> Decimal:
        price = round2(bounded_amount(value, label="Price per share"))
        if price <= 0:
            raise ValidationDecline("Price per share must be positive")
        return price


__all__ = [
    "FALLBACK_PRICE_PER_SHARE",
    "FALLBACK_STAGE_NAME",
    "FALLBACK_STAGE_NUMBER",
    "FallbackStage",
    "FoundStage",
    "RunningStage",
    "StageRegistry",
]
