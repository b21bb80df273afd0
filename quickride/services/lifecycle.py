"""Shareholder registration, approval workflow, login gate and removal."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quickride.core.errors import (
    BusinessDecline,
    DuplicateDecline,
    ForbiddenDecline,
    NotFoundDecline,
    StateDecline,
    ValidationDecline,
)
from quickride.core.money import bounded_amount, round2
from quickride.db.transaction import unit_of_work
from quickride.models import BusinessRole, DividendRecord, Shareholder, ShareholderStatus
from quickride.services.security import MAX_PASSWORD_BYTES, PasswordHasher
from quickride.services.stages import StageRegistry

logger = logging.getLogger(__name__)


def _check_password_length(password: str) -> None:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationDecline(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")


class InvalidCredentialsError(BusinessDecline):
    """Raised when the username is unknown or the password does not match."""

    reason = "invalid_credentials"


class PendingApprovalError(StateDecline):
    """Raised when credentials are correct but the account is not approved yet."""

    reason = "pending_approval"


@dataclass(slots=True, frozen=True)
class Registration:
    """Validated registration input."""

    full_name: str
    address: str
    phone: str
    email: str
    username: str
    password: str
    num_shares: int
    father_name: str = ""
    pin_code: str = ""
    business_role: BusinessRole = BusinessRole.DRIVER
    photo_data: str | None = None
    signature_data: str | None = None

    def missing_fields(self) -> list[str]:
        required = {
            "full_name": self.full_name,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "username": self.username,
            "password": self.password,
        }
        missing = [name for name, value in required.items() if not (value or "").strip()]
        if not self.num_shares:
            missing.append("num_shares")
        return missing


class ShareholderLifecycle:
    """State machine and account operations for shareholder records."""

    def __init__(
        self,
        session: Session,
        *,
        hasher: PasswordHasher,
        stages: StageRegistry | None = None,
    ) -> None:
        self._session = session
        self._hasher = hasher
        self._stages = stages or StageRegistry(session)

    async def register(self, registration: Registration) -> Shareholder:
        missing = registration.missing_fields()
        if missing:
            raise ValidationDecline(f"Missing required fields: {', '.join(missing)}")
        if registration.num_shares < 0:
            raise ValidationDecline("Number of shares cannot be negative")
        _check_password_length(registration.password)
        if registration.business_role == BusinessRole.ADMIN:
            raise ForbiddenDecline("The ADMIN role cannot be requested at registration")
        if self._find_by_username(registration.username) is not None:
            raise DuplicateDecline("Username already taken")
        if self._find_by_email(registration.email) is not None:
            raise DuplicateDecline("Email already registered")

        running = self._stages.get_running_stage()
        price = round2(running.price_per_share)
        total_investment = round2(bounded_amount(price * registration.num_shares, label="Total investment"))
        password_hash = await self._hasher.hash(registration.password)

        shareholder = Shareholder(
            full_name=registration.full_name.strip(),
            father_name=registration.father_name or "",
            address=registration.address.strip(),
            pin_code=registration.pin_code or "",
            phone=registration.phone.strip(),
            email=registration.email.strip(),
            business_role=registration.business_role,
            num_shares=registration.num_shares,
            username=registration.username.strip(),
            password_hash=password_hash,
            photo_data=registration.photo_data or None,
            signature_data=registration.signature_data or None,
            price_per_share=price,
            total_investment=total_investment,
            stage=running.stage,
            status=ShareholderStatus.PENDING,
        )
        self._session.add(shareholder)
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateDecline("Username or email already registered") from exc
        self._session.refresh(shareholder)
        logger.info(
            "registered shareholder %s at stage %s (%s shares @ %s)",
            shareholder.id,
            shareholder.stage,
            shareholder.num_shares,
            shareholder.price_per_share,
        )
        return shareholder

    async def authenticate(self, username: str, password: str) -> Shareholder:
        if not username or not password:
            raise ValidationDecline("Username and password required")
        shareholder = self._find_by_username(username)
        if shareholder is None or not await self._hasher.verify(password, shareholder.password_hash):
            raise InvalidCredentialsError("Invalid credentials.")
        if not shareholder.is_admin and shareholder.status != ShareholderStatus.APPROVED:
            raise PendingApprovalError("Account pending approval. Please wait for admin to approve.")
        return shareholder

    def get(self, shareholder_id: int) -> Shareholder:
        shareholder = self._session.get(Shareholder, shareholder_id)
        if shareholder is None:
            raise NotFoundDecline("Shareholder not found")
        return shareholder

    def set_status(self, shareholder_id: int, status: ShareholderStatus) -> Shareholder:
        """Move a shareholder to ``status``; ``approved_at`` follows the target status."""

        shareholder = self.get(shareholder_id)
        target = ShareholderStatus(status)
        shareholder.status = target
        shareholder.approved_at = datetime.now(timezone.utc) if target == ShareholderStatus.APPROVED else None
        self._session.commit()
        self._session.refresh(shareholder)
        logger.info("shareholder %s status set to %s", shareholder_id, target.value)
        return shareholder

    async def update_credentials(
        self,
        shareholder_id: int,
        *,
        username: str | None = None,
        password: str | None = None,
    ) -> Shareholder:
        shareholder = self.get(shareholder_id)
        if shareholder.is_admin:
            raise ForbiddenDecline("Admin credentials cannot be changed here")
        new_username = (username or "").strip()
        if not new_username and not password:
            raise ValidationDecline("Provide a new username or password")
        if password:
            _check_password_length(password)

        if new_username and new_username != shareholder.username:
            clash = self._find_by_username(new_username)
            if clash is not None and clash.id != shareholder.id:
                raise DuplicateDecline("Username already taken")
            shareholder.username = new_username
        if password:
            shareholder.password_hash = await self._hasher.hash(password)

        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateDecline("Username already taken") from exc
        self._session.refresh(shareholder)
        logger.info("credentials updated for shareholder %s", shareholder_id)
        return shareholder

    def delete(self, shareholder_id: int) -> None:
        """Remove a shareholder after removing its dividend records."""

        shareholder = self.get(shareholder_id)
        if shareholder.is_admin:
            raise ForbiddenDecline("The admin account cannot be deleted")
        with unit_of_work(self._session):
            removed = self._session.execute(
                delete(DividendRecord).where(DividendRecord.shareholder_id == shareholder.id)
            )
            self._session.delete(shareholder)
        logger.info(
            "deleted shareholder %s and %d dividend records", shareholder_id, int(removed.rowcount or 0)
        )

    def _find_by_username(self, username: str) -> Shareholder | None:
        statement = select(Shareholder).where(Shareholder.username == username.strip())
        return self._session.scalars(statement).one_or_none()

    def _find_by_email(self, email: str) -> Shareholder | None:
        statement = select(Shareholder).where(Shareholder.email == email.strip())
        return self._session.scalars(statement).one_or_none()


__all__ = [
    "InvalidCredentialsError",
    "PendingApprovalError",
    "Registration",
    "ShareholderLifecycle",
]
