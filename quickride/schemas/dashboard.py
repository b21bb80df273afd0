"""Schemas for dashboards, role prices and subscriber counters."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel

from .common import SuccessResponse
from .dividend import DividendRead
from .shareholder import ShareholderDetail, ShareholderSummary
from .stage import RunningStageRead


class PricesUpdate(BaseModel):
    prices: dict[str, Decimal]


class SubscribersUpdate(BaseModel):
    counts: dict[str, int]


class PricesResponse(SuccessResponse):
    prices: dict[str, Decimal]


class SubscribersResponse(SuccessResponse):
    counts: dict[str, int]
    total: int


class ShareholderDashboardResponse(SuccessResponse):
    shareholder: ShareholderDetail
    ownership_percentage: Decimal
    subscriber_counts: dict[str, int]
    total_subscribers: int
    role_prices: dict[str, Decimal]
    running_stage: RunningStageRead
    dividends: list[DividendRead]
    total_dividends_net: Decimal


class AdminDashboardResponse(SuccessResponse):
    agreements: list[ShareholderSummary]
    status_counts: dict[str, int]
    subscriber_counts: dict[str, int]
    total_subscribers: int
    role_prices: dict[str, Decimal]
    running_stage: RunningStageRead
    total_dividends_paid: Decimal


__all__ = [
    "AdminDashboardResponse",
    "PricesResponse",
    "PricesUpdate",
    "ShareholderDashboardResponse",
    "SubscribersResponse",
    "SubscribersUpdate",
]
