import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from quickride.core.errors import DuplicateDecline, ForbiddenDecline, NotFoundDecline, ValidationDecline
from quickride.models import BusinessRole, DividendRecord, Shareholder, ShareholderStatus
from quickride.services.dividends import DividendAllocator
from quickride.services.lifecycle import (
    InvalidCredentialsError,
    PendingApprovalError,
    Registration,
    ShareholderLifecycle,
)
from quickride.services.stages import StageRegistry


def _registration(**overrides: object) -> Registration:
    fields: dict[str, object] = {
        "full_name": "Pema Lhamu",
        "address": "Tadong, Gangtok",
        "phone": "+91 98000 11111",
        "email": "pema@example.com",
        "username": "pema",
        "password": "momo-1234",
        "num_shares": 100,
    }
    fields.update(overrides)
    return Registration(**fields)


def test_registration_prices_at_running_stage(db_session: Session, hasher) -> None:
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
    shareholder = asyncio.run(lifecycle.register(_registration()))

    assert shareholder.price_per_share == Decimal("1200.00")
    assert shareholder.total_investment == Decimal("120000.00")
    assert shareholder.stage == 2
    assert shareholder.status == ShareholderStatus.PENDING
    assert shareholder.business_role == BusinessRole.DRIVER
    assert shareholder.password_hash != "momo-1234"
    assert shareholder.agreement_id == f"QR-{shareholder.id:05d}"


def test_registered_terms_survive_stage_change(db_session: Session, hasher) -> None:
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
    shareholder = asyncio.run(lifecycle.register(_registration()))

    registry = StageRegistry(db_session)
    registry.upsert_stage(2, {"status": "SOLD_OUT"})
    registry.upsert_stage(3, {"status": "RUNNING"})

    db_session.refresh(shareholder)
    assert shareholder.stage == 2
    assert shareholder.price_per_share == Decimal("1200.00")

    later = asyncio.run(lifecycle.register(_registration(username="karma", email="karma@example.com", num_shares=10)))
    assert later.stage == 3
    assert later.total_investment == Decimal("14400.00")


def test_missing_fields_are_declined(db_session: Session, hasher) -> None:
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
    with pytest.raises(ValidationDecline) as excinfo:
        asyncio.run(lifecycle.register(_registration(email="  ", num_shares=0)))
    assert "email" in excinfo.value.message
    assert "num_shares" in excinfo.value.message


def test_duplicate_username_and_email_are_declined(db_session: Session, hasher) -> None:
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
    asyncio.run(lifecycle.register(_registration()))

    with pytest.raises(DuplicateDecline, match="Username already taken"):
        asyncio.run(lifecycle.register(_registration(email="other@example.com")))
    with pytest.raises(DuplicateDecline, match="Email already registered"):
        asyncio.run(lifecycle.register(_registration(username="other")))


def test_admin_role_cannot_be_requested(db_session: Session, hasher) -> None:
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
    with pytest.raises(ForbiddenDecline):
        asyncio.run(lifecycle.register(_registration(business_role=BusinessRole.ADMIN)))


def test_login_gate_distinguishes_pending_from_bad_password(db_session: Session, hasher) -> None:
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
    shareholder = asyncio.run(lifecycle.register(_registration()))

    with pytest.raises(InvalidCredentialsError):
        asyncio.run(lifecycle.authenticate("pema", "wrong"))
    with pytest.raises(InvalidCredentialsError):
        asyncio.run(lifecycle.authenticate("nobody", "momo-1234"))
    with pytest.raises(PendingApprovalError):
        asyncio.run(lifecycle.authenticate("pema", "momo-1234"))

    lifecycle.set_status(shareholder.id, ShareholderStatus.APPROVED)
    assert asyncio.run(lifecycle.authenticate("pema", "momo-1234")).id == shareholder.id


def test_admin_logs_in_without_approval_check(db_session: Session, hasher) -> None:
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
    admin = asyncio.run(lifecycle.authenticate("admin", "admin123"))
    assert admin.is_admin


def test_approved_at_follows_target_status(db_session: Session, hasher) -> None:
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
    shareholder = asyncio.run(lifecycle.register(_registration()))
    assert shareholder.approved_at is None

    approved = lifecycle.set_status(shareholder.id, ShareholderStatus.APPROVED)
    assert approved.approved_at is not None

    rejected = lifecycle.set_status(shareholder.id, ShareholderStatus.REJECTED)
    assert rejected.approved_at is None

    pending_again = lifecycle.set_status(shareholder.id, ShareholderStatus.PENDING)
    assert pending_again.status == ShareholderStatus.PENDING


def test_set_status_on_missing_shareholder(db_session: Session, hasher) -> None:
    with pytest.raises(NotFoundDecline):
        ShareholderLifecycle(db_session, hasher=hasher).set_status(9999, ShareholderStatus.APPROVED)


def test_update_credentials(db_session: Session, hasher, make_shareholder) -> None:
    first = make_shareholder()
    second = make_shareholder()
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)

    with pytest.raises(ValidationDecline):
        asyncio.run(lifecycle.update_credentials(first.id))
    with pytest.raises(DuplicateDecline):
        asyncio.run(lifecycle.update_credentials(first.id, username=second.username))

    updated = asyncio.run(lifecycle.update_credentials(first.id, username="renamed", password="n3w-pass"))
    assert updated.username == "renamed"
    assert asyncio.run(lifecycle.authenticate("renamed", "n3w-pass")).id == first.id


def test_admin_credentials_cannot_be_changed(db_session: Session, hasher) -> None:
    admin = db_session.scalars(select(Shareholder).where(Shareholder.username == "admin")).one()
    with pytest.raises(ForbiddenDecline):
        asyncio.run(ShareholderLifecycle(db_session, hasher=hasher).update_credentials(admin.id, password="x"))


def test_admin_deletion_is_always_rejected(db_session: Session, hasher) -> None:
    admin = db_session.scalars(select(Shareholder).where(Shareholder.username == "admin")).one()
    with pytest.raises(ForbiddenDecline):
        ShareholderLifecycle(db_session, hasher=hasher).delete(admin.id)
    assert db_session.get(Shareholder, admin.id) is not None


def test_delete_removes_dividend_records(db_session: Session, hasher, make_shareholder) -> None:
    shareholder = make_shareholder(num_shares=5)
    keeper = make_shareholder(num_shares=5)
    DividendAllocator(db_session).pay_all(month="2026-09", total_gross_amount=Decimal("1000"))

    shareholder_id = shareholder.id
    ShareholderLifecycle(db_session, hasher=hasher).delete(shareholder_id)

    assert db_session.get(Shareholder, shareholder_id) is None
    remaining = db_session.scalar(
        select(func.count()).select_from(DividendRecord).where(DividendRecord.shareholder_id == shareholder_id)
    )
    assert remaining == 0
    kept = db_session.scalar(
        select(func.count()).select_from(DividendRecord).where(DividendRecord.shareholder_id == keeper.id)
    )
    assert kept == 1


def test_password_longer_than_bcrypt_limit_is_declined(db_session: Session, hasher) -> None:
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
    with pytest.raises(ValidationDecline):
        asyncio.run(lifecycle.register(_registration(password="p" * 80)))
    # 40 characters but 80 UTF-8 bytes
    with pytest.raises(ValidationDecline):
        asyncio.run(lifecycle.register(_registration(password="é" * 40)))
    assert db_session.scalar(select(func.count()).select_from(Shareholder).where(Shareholder.username == "pema")) == 0

    shareholder = asyncio.run(lifecycle.register(_registration(password="p" * 72)))
    assert shareholder.username == "pema"


def test_long_password_is_declined_on_credential_update(db_session: Session, hasher, make_shareholder) -> None:
    shareholder = make_shareholder()
    original_hash = shareholder.password_hash
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)

    with pytest.raises(ValidationDecline):
        asyncio.run(lifecycle.update_credentials(shareholder.id, username="renamed", password="p" * 73))

    db_session.refresh(shareholder)
    assert shareholder.username != "renamed"
    assert shareholder.password_hash == original_hash


def test_unstorable_investment_total_is_declined(db_session: Session, hasher) -> None:
    lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
    with pytest.raises(ValidationDecline):
        asyncio.run(lifecycle.register(_registration(num_shares=10**20)))
