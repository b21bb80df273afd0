"""Common dependencies for API routes."""
from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from quickride.core.config import Settings, get_settings
from quickride.db.session import SessionLocal
from quickride.services.documents import AgreementRenderer, Branding
from quickride.services.security import BcryptPasswordHasher, PasswordHasher


def get_db_session() -> Iterator[Session]:
    """Yield a database session for FastAPI dependencies."""

    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return BcryptPasswordHasher(rounds=settings.bcrypt_rounds)


def get_renderer(settings: Settings = Depends(get_settings)) -> AgreementRenderer:
    branding = Branding(
        company_name=settings.company_name,
        division=settings.company_division,
        title=settings.agreement_title,
        contact_line=settings.office_contact_line,
    )
    return AgreementRenderer(branding)


__all__ = ["get_db_session", "get_hasher", "get_renderer"]
