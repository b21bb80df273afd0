"""Schemas for dividend payouts."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from quickride.models import DividendStatus

from .common import SuccessResponse


class DividendCreate(BaseModel):
    shareholder_id: int
    month: str = ""
    gross_amount: Decimal
    gst_rate: Decimal = Decimal("0")
    payment_method: str = Field(default="BANK_TRANSFER", max_length=64)


class DividendDistribute(BaseModel):
    month: str = ""
    total_gross_amount: Decimal
    gst_rate: Decimal = Decimal("0")
    payment_method: str = Field(default="BANK_TRANSFER", max_length=64)


class DividendRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    shareholder_id: int
    month: str
    gross_amount: Decimal
    gst_rate: Decimal
    gst_amount: Decimal
    net_amount: Decimal
    payment_method: str
    status: DividendStatus
    paid_at: datetime


class PayoutRead(SuccessResponse):
    gross: Decimal
    gst_amount: Decimal
    net: Decimal


class AllocationRead(BaseModel):
    shareholder_id: int
    num_shares: int
    gross: Decimal
    gst_amount: Decimal
    net: Decimal


class DistributionRead(SuccessResponse):
    paid_count: int
    total_gross: Decimal
    total_net: Decimal
    allocations: list[AllocationRead]


class DividendHistory(SuccessResponse):
    dividends: list[DividendRead]


__all__ = [
    "AllocationRead",
    "DistributionRead",
    "DividendCreate",
    "DividendDistribute",
    "DividendHistory",
    "DividendRead",
    "PayoutRead",
]
