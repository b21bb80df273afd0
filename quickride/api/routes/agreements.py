"""Public agreement submission."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quickride.api.deps import get_db_session, get_hasher
from quickride.schemas import AgreementCreate, AgreementCreated
from quickride.services.lifecycle import Registration, ShareholderLifecycle
from quickride.services.security import PasswordHasher

router = APIRouter(prefix="/agreements")


@router.post("", response_model=AgreementCreated, status_code=status.HTTP_201_CREATED)
async def submit_agreement(
    payload: AgreementCreate,
    session: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_hasher),
) -> AgreementCreated:
    registration = Registration(**payload.model_dump())
    shareholder = await ShareholderLifecycle(session, hasher=hasher).register(registration)
    return AgreementCreated(
        message="Agreement submitted. Await admin approval before logging in.",
        id=shareholder.id,
        agreement_id=shareholder.agreement_id,
        price_per_share=shareholder.price_per_share,
        total_investment=shareholder.total_investment,
        stage=shareholder.stage,
    )


__all__ = ["router", "submit_agreement"]
