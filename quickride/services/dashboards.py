"""Read-only views assembled for the shareholder and admin dashboards."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from quickride.models import BusinessRole, DividendRecord, Shareholder, ShareholderStatus
from quickride.services.catalog import RoleCatalog
from quickride.services.dividends import DividendAllocator
from quickride.services.lifecycle import ShareholderLifecycle
from quickride.services.security import PasswordHasher
from quickride.services.stages import RunningStage, StageRegistry

_STATUS_ORDER = case(
    (Shareholder.status == ShareholderStatus.PENDING, 0),
    (Shareholder.status == ShareholderStatus.APPROVED, 1),
    else_=2,
)


@dataclass(slots=True)
class ShareholderDashboard:
    shareholder: Shareholder
    subscriber_counts: dict[str, int]
    total_subscribers: int
    role_prices: dict[str, Decimal]
    running_stage: RunningStage
    dividends: list[DividendRecord]
    total_dividends_net: Decimal


@dataclass(slots=True)
class AdminDashboard:
    agreements: list[Shareholder]
    status_counts: dict[str, int]
    subscriber_counts: dict[str, int]
    total_subscribers: int
    role_prices: dict[str, Decimal]
    running_stage: RunningStage
    total_dividends_paid: Decimal


class DashboardService:
    def __init__(self, session: Session, *, hasher: PasswordHasher) -> None:
        self._session = session
        self._lifecycle = ShareholderLifecycle(session, hasher=hasher)
        self._catalog = RoleCatalog(session)
        self._stages = StageRegistry(session)
        self._dividends = DividendAllocator(session)

    def for_shareholder(self, shareholder_id: int, *, dividend_limit: int = 24) -> ShareholderDashboard:
        shareholder = self._lifecycle.get(shareholder_id)
        counts = self._catalog.subscriber_counts()
        dividends = self._dividends.dividend_history(shareholder_id, limit=dividend_limit)
        net_total = self._session.scalar(
            select(func.coalesce(func.sum(DividendRecord.net_amount), 0)).where(
                DividendRecord.shareholder_id == shareholder_id
            )
        )
        return ShareholderDashboard(
            shareholder=shareholder,
            subscriber_counts=counts,
            total_subscribers=sum(counts.values()),
            role_prices=self._catalog.prices(),
            running_stage=self._stages.get_running_stage(),
            dividends=dividends,
            total_dividends_net=Decimal(str(net_total)),
        )

    def for_admin(self) -> AdminDashboard:
        statement = (
            select(Shareholder)
            .where(Shareholder.business_role != BusinessRole.ADMIN)
            .order_by(_STATUS_ORDER, Shareholder.created_at.desc(), Shareholder.id.desc())
        )
        agreements = list(self._session.scalars(statement).all())
        status_counts = {status.value: 0 for status in ShareholderStatus}
        for agreement in agreements:
            status_counts[agreement.status.value] += 1
        counts = self._catalog.subscriber_counts()
        paid = self._session.scalar(select(func.coalesce(func.sum(DividendRecord.net_amount), 0)))
        return AdminDashboard(
            agreements=agreements,
            status_counts=status_counts,
            subscriber_counts=counts,
            total_subscribers=sum(counts.values()),
            role_prices=self._catalog.prices(),
            running_stage=self._stages.get_running_stage(),
            total_dividends_paid=Decimal(str(paid)),
        )


__all__ = ["AdminDashboard", "DashboardService", "ShareholderDashboard"]
