"""Dividend payout endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quickride.api.deps import get_db_session
from quickride.api.routes.auth import AuthenticatedUser, require_role
from quickride.obs import business_span
from quickride.schemas import AllocationRead, DistributionRead, DividendCreate, DividendDistribute, PayoutRead
from quickride.services.dividends import DividendAllocator

router = APIRouter(prefix="/admin/dividends")


@router.post("", response_model=PayoutRead)
def pay_dividend(
    payload: DividendCreate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_role("ADMIN")),
) -> PayoutRead:
    with business_span("dividends.pay_one", shareholder_id=payload.shareholder_id):
        breakdown = DividendAllocator(session).pay_one(
            shareholder_id=payload.shareholder_id,
            month=payload.month,
            gross_amount=payload.gross_amount,
            gst_rate=payload.gst_rate,
            payment_method=payload.payment_method,
        )
    return PayoutRead(gross=breakdown.gross, gst_amount=breakdown.gst_amount, net=breakdown.net)


@router.post("/distribute", response_model=DistributionRead)
def distribute_dividends(
    payload: DividendDistribute,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_role("ADMIN")),
) -> DistributionRead:
    with business_span("dividends.pay_all", month=payload.month):
        result = DividendAllocator(session).pay_all(
            month=payload.month,
            total_gross_amount=payload.total_gross_amount,
            gst_rate=payload.gst_rate,
            payment_method=payload.payment_method,
        )
    return DistributionRead(
        paid_count=result.paid_count,
        total_gross=result.total_gross,
        total_net=result.total_net,
        allocations=[
            AllocationRead(
                shareholder_id=item.shareholder_id,
                num_shares=item.num_shares,
                gross=item.breakdown.gross,
                gst_amount=item.breakdown.gst_amount,
                net=item.breakdown.net,
            )
            for item in result.allocations
        ],
    )


__all__ = ["distribute_dividends", "pay_dividend", "router"]
