"""Reference data: default investment stages, role prices, counters and the admin account."""
from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from quickride.core.config import Settings, get_settings
from quickride.models import (
    BusinessRole,
    InvestmentStage,
    RolePrice,
    Shareholder,
    ShareholderStatus,
    StageStatus,
    SubscriberCount,
    SUBSCRIBER_ROLES,
)
from quickride.services.catalog import DEFAULT_ROLE_PRICES
from quickride.services.security import BcryptPasswordHasher

logger = logging.getLogger(__name__)

DEFAULT_STAGES = (
    (1, "Base Price", Decimal("1000"), 0, 1500, StageStatus.SOLD_OUT, 0),
    (2, "Current Price", Decimal("1200"), 1501, 5000, StageStatus.RUNNING, 100),
    (3, "Next Price", Decimal("1440"), 5001, 15000, StageStatus.UPCOMING, 100),
)


def seed_reference_data(session: Session, settings: Settings | None = None) -> Shareholder:
    """Insert missing defaults and return the (re-approved) admin shareholder.

    Existing stages, prices and counters are left untouched.
    """

    settings = settings or get_settings()

    existing_stages = set(session.scalars(select(InvestmentStage.stage)))
    for stage, name, price, low, high, status, available in DEFAULT_STAGES:
        if stage in existing_stages:
            continue
        session.add(
            InvestmentStage(
                stage=stage,
                name=name,
                price_per_share=price,
                min_subscribers=low,
                max_subscribers=high,
                status=status,
                shares_available=available,
            )
        )
        logger.info("Added investment stage %s (%s)", stage, name)

    for role, price in DEFAULT_ROLE_PRICES.items():
        if session.get(RolePrice, role) is None:
            session.add(RolePrice(business_role=role, price=price))

    counted = set(session.scalars(select(SubscriberCount.business_role)))
    for role in SUBSCRIBER_ROLES:
        if role.value not in counted:
            session.add(SubscriberCount(business_role=role.value, count=0))

    admin = session.scalars(
        select(Shareholder).where(Shareholder.username == settings.admin_username)
    ).one_or_none()
    if admin is None:
        hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
        admin = Shareholder(
            full_name="Administrator",
            father_name="",
            address="Quick Ride HQ",
            pin_code="000000",
            phone="+91 00000 00000",
            email=settings.admin_email,
            business_role=BusinessRole.ADMIN,
            num_shares=0,
            username=settings.admin_username,
            password_hash=hasher.hash_sync(settings.admin_password),
            price_per_share=Decimal("0"),
            total_investment=Decimal("0"),
            stage=0,
            status=ShareholderStatus.APPROVED,
        )
        session.add(admin)
        logger.info("Created admin account %s", settings.admin_username)
    elif admin.status != ShareholderStatus.APPROVED:
        admin.status = ShareholderStatus.APPROVED
        logger.info("Re-approved admin account %s", settings.admin_username)

    session.commit()
    return admin


__all__ = ["DEFAULT_STAGES", "seed_reference_data"]
