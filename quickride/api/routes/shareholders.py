"""Shareholder self-service views."""
from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quickride.api.deps import get_db_session, get_hasher
from quickride.api.routes.auth import AuthenticatedUser, ensure_self_or_admin, get_current_user
from quickride.schemas import (
    DividendHistory,
    DividendRead,
    RunningStageRead,
    ShareholderDashboardResponse,
    ShareholderDetail,
    ShareholderDetailResponse,
)
from quickride.services.dashboards import DashboardService
from quickride.services.dividends import DividendAllocator
from quickride.services.documents.agreement import TOTAL_SHARES_DENOMINATOR
from quickride.services.lifecycle import ShareholderLifecycle
from quickride.services.security import PasswordHasher

router = APIRouter()


@router.get("/{shareholder_id}/details", response_model=ShareholderDetailResponse)
def get_details(
    shareholder_id: int,
    session: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_hasher),
    user: AuthenticatedUser = Depends(get_current_user),
) -> ShareholderDetailResponse:
    ensure_self_or_admin(user, shareholder_id)
    shareholder = ShareholderLifecycle(session, hasher=hasher).get(shareholder_id)
    return ShareholderDetailResponse(shareholder=ShareholderDetail.model_validate(shareholder))


@router.get("/{shareholder_id}/dashboard", response_model=ShareholderDashboardResponse)
def get_dashboard(
    shareholder_id: int,
    session: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_hasher),
    user: AuthenticatedUser = Depends(get_current_user),
) -> ShareholderDashboardResponse:
    ensure_self_or_admin(user, shareholder_id)
    view = DashboardService(session, hasher=hasher).for_shareholder(shareholder_id)
    ownership = (
        Decimal(view.shareholder.num_shares) / Decimal(TOTAL_SHARES_DENOMINATOR) * Decimal(100)
    ).quantize(Decimal("0.001"))
    return ShareholderDashboardResponse(
        shareholder=ShareholderDetail.model_validate(view.shareholder),
        ownership_percentage=ownership,
        subscriber_counts=view.subscriber_counts,
        total_subscribers=view.total_subscribers,
        role_prices=view.role_prices,
        running_stage=RunningStageRead.model_validate(view.running_stage),
        dividends=[DividendRead.model_validate(item) for item in view.dividends],
        total_dividends_net=view.total_dividends_net,
    )


@router.get("/{shareholder_id}/dividends", response_model=DividendHistory)
def list_dividends(
    shareholder_id: int,
    limit: int = Query(default=24, ge=1, le=500),
    session: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_hasher),
    user: AuthenticatedUser = Depends(get_current_user),
) -> DividendHistory:
    ensure_self_or_admin(user, shareholder_id)
    ShareholderLifecycle(session, hasher=hasher).get(shareholder_id)
    records = DividendAllocator(session).dividend_history(shareholder_id, limit=limit)
    return DividendHistory(dividends=[DividendRead.model_validate(item) for item in records])


__all__ = ["get_dashboard", "get_details", "list_dividends", "router"]
