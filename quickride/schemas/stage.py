"""Schemas for investment stages."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from quickride.models import StageStatus

from .common import SuccessResponse


class StageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage: int
    name: str
    price_per_share: Decimal
    min_subscribers: int
    max_subscribers: int
    status: StageStatus
    shares_available: int


class RunningStageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage: int
    name: str
    price_per_share: Decimal


class StageUpsert(BaseModel):
    name: str | None = Field(default=None, max_length=128)
    price_per_share: Decimal | None = None
    status: StageStatus | None = None
    shares_available: int | None = Field(default=None, ge=0)
    min_subscribers: int | None = Field(default=None, ge=0)
    max_subscribers: int | None = Field(default=None, ge=0)


class StageList(SuccessResponse):
    stages: list[StageRead]
    running: RunningStageRead
    applicable_stage: int | None = None


class RunningStageResponse(SuccessResponse):
    stage: RunningStageRead


class StageSaved(SuccessResponse):
    stage: StageRead


__all__ = ["RunningStageRead", "RunningStageResponse", "StageList", "StageRead", "StageSaved", "StageUpsert"]
