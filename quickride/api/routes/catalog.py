"""Public price list and investment stage views."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quickride.api.deps import get_db_session
from quickride.schemas import PricesResponse, RunningStageRead, RunningStageResponse, StageList, StageRead
from quickride.services.catalog import RoleCatalog
from quickride.services.stages import StageRegistry

router = APIRouter()


@router.get("/prices", response_model=PricesResponse)
def get_prices(session: Session = Depends(get_db_session)) -> PricesResponse:
    return PricesResponse(prices=RoleCatalog(session).prices())


@router.get("/stages", response_model=StageList)
def list_stages(session: Session = Depends(get_db_session)) -> StageList:
    registry = StageRegistry(session)
    applicable = registry.applicable_stage(RoleCatalog(session).total_subscribers())
    return StageList(
        stages=[StageRead.model_validate(stage) for stage in registry.list_stages()],
        running=RunningStageRead.model_validate(registry.get_running_stage()),
        applicable_stage=applicable.stage if applicable is not None else None,
    )


@router.get("/stages/running", response_model=RunningStageResponse)
def get_running_stage(session: Session = Depends(get_db_session)) -> RunningStageResponse:
    return RunningStageResponse(stage=RunningStageRead.model_validate(StageRegistry(session).get_running_stage()))


__all__ = ["get_prices", "get_running_stage", "list_stages", "router"]
