"""Pydantic schemas for shareholder agreements."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from quickride.models import BusinessRole, ShareholderStatus

from .common import SuccessResponse


class AgreementCreate(BaseModel):
    """Registration form; blank required fields are declined by the lifecycle service."""

    full_name: str = Field(default="", max_length=255)
    father_name: str = Field(default="", max_length=255)
    address: str = Field(default="", max_length=500)
    pin_code: str = Field(default="", max_length=16)
    phone: str = Field(default="", max_length=32)
    email: str = Field(default="", max_length=320)
    business_role: BusinessRole = BusinessRole.DRIVER
    num_shares: int = 0
    username: str = Field(default="", max_length=128)
    password: str = ""
    photo_data: str | None = None
    signature_data: str | None = Field(default=None, alias="investor_signature")

    model_config = ConfigDict(populate_by_name=True)


class ShareholderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    agreement_id: str
    full_name: str
    email: str
    phone: str
    business_role: BusinessRole
    num_shares: int
    price_per_share: Decimal
    total_investment: Decimal
    stage: int
    status: ShareholderStatus
    username: str
    created_at: datetime
    approved_at: datetime | None = None


class ShareholderDetail(ShareholderSummary):
    father_name: str
    address: str
    pin_code: str
    photo_data: str | None = None
    signature_data: str | None = None


class AgreementCreated(SuccessResponse):
    message: str
    id: int
    agreement_id: str
    price_per_share: Decimal
    total_investment: Decimal
    stage: int


class ShareholderDetailResponse(SuccessResponse):
    shareholder: ShareholderDetail


class StatusUpdate(BaseModel):
    status: ShareholderStatus


class StatusUpdated(SuccessResponse):
    id: int
    status: ShareholderStatus
    approved_at: datetime | None = None


class CredentialsUpdate(BaseModel):
    username: str | None = Field(default=None, max_length=128)
    password: str | None = None


class CredentialsUpdated(SuccessResponse):
    id: int
    username: str


__all__ = [
    "AgreementCreate",
    "AgreementCreated",
    "CredentialsUpdate",
    "CredentialsUpdated",
    "ShareholderDetail",
    "ShareholderDetailResponse",
    "ShareholderSummary",
    "StatusUpdate",
    "StatusUpdated",
]
