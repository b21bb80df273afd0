"""Dividend payout calculations and persistence."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from quickride.core.errors import NotFoundDecline, StateDecline, ValidationDecline
from quickride.core.money import bounded_amount, round2, to_decimal
from quickride.db.transaction import unit_of_work
from quickride.models import (
    BusinessRole,
    DividendRecord,
    DividendStatus,
    Shareholder,
    ShareholderStatus,
)
from quickride.obs import DIVIDEND_AMOUNT_COUNTER, DIVIDEND_RECORDS_COUNTER

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHOD = "BANK_TRANSFER"
MAX_GST_RATE = Decimal("999.9999")


@dataclass(frozen=True, slots=True)
class PayoutBreakdown:
    gross: Decimal
    gst_amount: Decimal
    net: Decimal


@dataclass(frozen=True, slots=True)
class Allocation:
    shareholder_id: int
    num_shares: int
    ratio: Decimal
    breakdown: PayoutBreakdown


@dataclass(frozen=True, slots=True)
class BulkPayoutResult:
    paid_count: int
    allocations: list[Allocation]

    @property
    def total_gross(self) -> Decimal:
        return sum((item.breakdown.gross for item in self.allocations), Decimal("0.00"))

    @property
    def total_net(self) -> Decimal:
        return sum((item.breakdown.net for item in self.allocations), Decimal("0.00"))


def clamp_gst_rate(gst_rate: Decimal | int | float | str) -> Decimal:
    """Negative GST rates are treated as zero."""

    rate = to_decimal(gst_rate)
    if not rate.is_finite() or rate > MAX_GST_RATE:
        raise ValidationDecline("GST rate is out of range")
    return max(Decimal("0"), rate)


def compute_payout(gross: Decimal | int | float | str, gst_rate: Decimal | int | float | str) -> PayoutBreakdown:
    """Deduct GST from a gross amount, rounding each step to two places."""

    gross_amount = round2(bounded_amount(gross, label="Gross amount"))
    rate = clamp_gst_rate(gst_rate)
    gst_amount = round2(bounded_amount(gross_amount * rate / Decimal("100"), label="GST amount"))
    net = round2(gross_amount - gst_amount)
    return PayoutBreakdown(gross=gross_amount, gst_amount=gst_amount, net=net)


def allocate_proportionally(
    total_gross: Decimal | int | float | str,
    holdings: Sequence[tuple[int, int]],
    gst_rate: Decimal | int | float | str,
) -> list[Allocation]:
    """Split ``total_gross`` across ``(shareholder_id, num_shares)`` pairs by share count.

    Each gross share is rounded on its own and the rounding remainder is not
    redistributed, so the allocated gross may differ from ``total_gross`` by up
    to one cent per holder.
    """

    total = bounded_amount(total_gross, label="Total gross amount")
    total_shares = sum(shares for _, shares in holdings)
    if total_shares <= 0:
        raise ValidationDecline("Approved shareholders hold no shares", reason="no_shares")
    allocations: list[Allocation] = []
    for shareholder_id, shares in holdings:
        ratio = Decimal(shares) / Decimal(total_shares)
        breakdown = compute_payout(round2(total * ratio), gst_rate)
        allocations.append(
            Allocation(shareholder_id=shareholder_id, num_shares=shares, ratio=ratio, breakdown=breakdown)
        )
    return allocations


class DividendAllocator:
    """Records single and proportional dividend payouts."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def pay_one(
        self,
        *,
        shareholder_id: int,
        month: str,
        gross_amount: Decimal,
        gst_rate: Decimal = Decimal("0"),
        payment_method: str = DEFAULT_PAYMENT_METHOD,
    ) -> PayoutBreakdown:
        gross = bounded_amount(gross_amount, label="Gross amount")
        if gross <= 0:
            raise ValidationDecline("Gross amount must be greater than zero")
        month_label = self._validated_month(month)

        shareholder = self._session.get(Shareholder, shareholder_id)
        if shareholder is None:
            raise NotFoundDecline(f"Shareholder {shareholder_id} not found")
        if shareholder.status != ShareholderStatus.APPROVED or shareholder.is_admin:
            raise StateDecline(
                "Dividends can only be paid to approved shareholders", reason="not_approved"
            )

        breakdown = compute_payout(gross, gst_rate)
        with unit_of_work(self._session):
            self._session.add(
                self._record(shareholder.id, month_label, breakdown, clamp_gst_rate(gst_rate), payment_method)
            )
        self._observe([breakdown])
        logger.info(
            "dividend paid to shareholder %s for %s: gross=%s net=%s",
            shareholder.id,
            month_label,
            breakdown.gross,
            breakdown.net,
        )
        return breakdown

    def pay_all(
        self,
        *,
        month: str,
        total_gross_amount: Decimal,
        gst_rate: Decimal = Decimal("0"),
        payment_method: str = DEFAULT_PAYMENT_METHOD,
    ) -> BulkPayoutResult:
        total = bounded_amount(total_gross_amount, label="Total gross amount")
        if total <= 0:
            raise ValidationDecline("Total gross amount must be greater than zero")
        month_label = self._validated_month(month)

        eligible = self._approved_holdings()
        if not eligible:
            raise StateDecline("No approved shareholders", reason="no_approved_shareholders")

        allocations = allocate_proportionally(total, eligible, gst_rate)
        rate = clamp_gst_rate(gst_rate)
        paid_at = datetime.now(timezone.utc)
        with unit_of_work(self._session):
            for allocation in allocations:
                self._session.add(
                    self._record(
                        allocation.shareholder_id,
                        month_label,
                        allocation.breakdown,
                        rate,
                        payment_method,
                        paid_at=paid_at,
                    )
                )
        self._observe([allocation.breakdown for allocation in allocations])
        logger.info(
            "distributed %s across %d shareholders for %s (allocated gross %s)",
            total,
            len(allocations),
            month_label,
            sum((a.breakdown.gross for a in allocations), Decimal("0.00")),
        )
        return BulkPayoutResult(paid_count=len(allocations), allocations=allocations)

    def dividend_history(self, shareholder_id: int, *, limit: int = 24) -> list[DividendRecord]:
        statement = (
            select(DividendRecord)
            .where(DividendRecord.shareholder_id == shareholder_id)
            .order_by(DividendRecord.paid_at.desc(), DividendRecord.id.desc())
            .limit(limit)
        )
        return list(self._session.scalars(statement).all())

    def _approved_holdings(self) -> list[tuple[int, int]]:
        statement = (
            select(Shareholder.id, Shareholder.num_shares)
            .where(
                Shareholder.status == ShareholderStatus.APPROVED,
                Shareholder.business_role != BusinessRole.ADMIN,
            )
            .order_by(Shareholder.id)
        )
        return [(row.id, row.num_shares) for row in self._session.execute(statement)]

    @staticmethod
    def _validated_month(month: str) -> str:
        label = (month or "").strip()
        if not label:
            raise ValidationDecline("Month is required")
        return label

    @staticmethod
    def _record(
        shareholder_id: int,
        month: str,
        breakdown: PayoutBreakdown,
        gst_rate: Decimal,
        payment_method: str,
        *,
        paid_at: datetime | None = None,
    ) -> DividendRecord:
        return DividendRecord(
            shareholder_id=shareholder_id,
            month=month,
            gross_amount=breakdown.gross,
            gst_rate=gst_rate,
            gst_amount=breakdown.gst_amount,
            net_amount=breakdown.net,
            payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
            status=DividendStatus.PAID,
            paid_at=paid_at or datetime.now(timezone.utc),
        )

    @staticmethod
    def _observe(breakdowns: Sequence[PayoutBreakdown]) -> None:
        DIVIDEND_RECORDS_COUNTER.inc(len(breakdowns))
        DIVIDEND_AMOUNT_COUNTER.inc(float(sum((b.gross for b in breakdowns), Decimal("0"))))


__all__ = [
    "Allocation",
    "BulkPayoutResult",
    "DEFAULT_PAYMENT_METHOD",
    "DividendAllocator",
    "MAX_GST_RATE",
    "PayoutBreakdown",
    "allocate_proportionally",
    "clamp_gst_rate",
    "compute_payout",
]
