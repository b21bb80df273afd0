"""Administrative endpoints; every route requires an ADMIN token."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from quickride.api.deps import get_db_session, get_hasher, get_renderer
from quickride.api.routes.auth import AuthenticatedUser, require_role
from quickride.schemas import (
    AdminDashboardResponse,
    CredentialsUpdate,
    CredentialsUpdated,
    MessageResponse,
    PricesResponse,
    PricesUpdate,
    RunningStageRead,
    ShareholderSummary,
    StageRead,
    StageSaved,
    StageUpsert,
    StatusUpdate,
    StatusUpdated,
    SubscribersResponse,
    SubscribersUpdate,
)
from quickride.services.catalog import RoleCatalog
from quickride.services.dashboards import DashboardService
from quickride.services.documents import AgreementData, AgreementRenderer
from quickride.services.lifecycle import ShareholderLifecycle
from quickride.services.security import PasswordHasher
from quickride.services.stages import StageRegistry

router = APIRouter(prefix="/admin")

admin_only = require_role("ADMIN")


@router.get("/dashboard", response_model=AdminDashboardResponse)
def get_admin_dashboard(
    session: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_hasher),
    user: AuthenticatedUser = Depends(admin_only),
) -> AdminDashboardResponse:
    view = DashboardService(session, hasher=hasher).for_admin()
    return AdminDashboardResponse(
        agreements=[ShareholderSummary.model_validate(item) for item in view.agreements],
        status_counts=view.status_counts,
        subscriber_counts=view.subscriber_counts,
        total_subscribers=view.total_subscribers,
        role_prices=view.role_prices,
        running_stage=RunningStageRead.model_validate(view.running_stage),
        total_dividends_paid=view.total_dividends_paid,
    )


@router.put("/agreements/{shareholder_id}", response_model=StatusUpdated)
def update_agreement_status(
    shareholder_id: int,
    payload: StatusUpdate,
    session: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_hasher),
    user: AuthenticatedUser = Depends(admin_only),
) -> StatusUpdated:
    shareholder = ShareholderLifecycle(session, hasher=hasher).set_status(shareholder_id, payload.status)
    return StatusUpdated(id=shareholder.id, status=shareholder.status, approved_at=shareholder.approved_at)


@router.post(
    "/agreements/{shareholder_id}/pdf",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
def download_agreement(
    shareholder_id: int,
    session: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_hasher),
    renderer: AgreementRenderer = Depends(get_renderer),
    user: AuthenticatedUser = Depends(admin_only),
) -> Response:
    shareholder = ShareholderLifecycle(session, hasher=hasher).get(shareholder_id)
    stage = StageRegistry(session).get_stage(shareholder.stage)
    data = AgreementData.from_shareholder(shareholder, stage_name=stage.name if stage is not None else None)
    rendered = renderer.render(data)
    return Response(
        content=rendered.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{rendered.filename}"',
            "X-Page-Count": str(rendered.page_count),
        },
    )


@router.put("/shareholders/{shareholder_id}/credentials", response_model=CredentialsUpdated)
async def update_credentials(
    shareholder_id: int,
    payload: CredentialsUpdate,
    session: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_hasher),
    user: AuthenticatedUser = Depends(admin_only),
) -> CredentialsUpdated:
    shareholder = await ShareholderLifecycle(session, hasher=hasher).update_credentials(
        shareholder_id, username=payload.username, password=payload.password
    )
    return CredentialsUpdated(id=shareholder.id, username=shareholder.username)


@router.delete("/shareholders/{shareholder_id}", response_model=MessageResponse)
def delete_shareholder(
    shareholder_id: int,
    session: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_hasher),
    user: AuthenticatedUser = Depends(admin_only),
) -> MessageResponse:
    ShareholderLifecycle(session, hasher=hasher).delete(shareholder_id)
    return MessageResponse(message=f"Shareholder {shareholder_id} deleted")


@router.put("/prices", response_model=PricesResponse)
def update_prices(
    payload: PricesUpdate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(admin_only),
) -> PricesResponse:
    return PricesResponse(prices=RoleCatalog(session).set_prices(payload.prices))


@router.put("/subscribers", response_model=SubscribersResponse)
def update_subscribers(
    payload: SubscribersUpdate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(admin_only),
) -> SubscribersResponse:
    counts = RoleCatalog(session).set_subscriber_counts(payload.counts)
    return SubscribersResponse(counts=counts, total=sum(counts.values()))


@router.put("/stages/{stage_number}", response_model=StageSaved)
def upsert_stage(
    stage_number: int,
    payload: StageUpsert,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(admin_only),
) -> StageSaved:
    stage = StageRegistry(session).upsert_stage(stage_number, payload.model_dump(exclude_unset=True))
    return StageSaved(stage=StageRead.model_validate(stage))


__all__ = [
    "delete_shareholder",
    "download_agreement",
    "get_admin_dashboard",
    "router",
    "update_agreement_status",
    "update_credentials",
    "update_prices",
    "update_subscribers",
    "upsert_stage",
]
