"""Role subscription prices and subscriber counters."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from quickride.core.errors import ValidationDecline
from quickride.core.money import bounded_amount, round2
from quickride.db.transaction import unit_of_work
from quickride.models import SUBSCRIBER_ROLES, RolePrice, SubscriberCount

logger = logging.getLogger(__name__)

DEFAULT_ROLE_PRICES: dict[str, Decimal] = {
    "DRIVER": Decimal("350"),
    "TRAVEL_AGENT": Decimal("500"),
    "SHOPS_HOTELS": Decimal("700"),
}

_ROLE_NAMES = frozenset(role.value for role in SUBSCRIBER_ROLES)


def _check_roles(values: Mapping[str, object]) -> None:
    if not values:
        raise ValidationDecline("No roles supplied")
    unknown = set(values) - _ROLE_NAMES
    if unknown:
        raise ValidationDecline(f"Unknown business roles: {', '.join(sorted(unknown))}")


class RoleCatalog:
    """Reads and updates the per-role price list and subscriber counters."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def prices(self) -> dict[str, Decimal]:
        rows = self._session.scalars(select(RolePrice).order_by(RolePrice.business_role)).all()
        return {row.business_role: round2(row.price) for row in rows}

    def set_prices(self, prices: Mapping[str, Decimal | int | float | str]) -> dict[str, Decimal]:
        _check_roles(prices)
        with unit_of_work(self._session):
            for role, value in prices.items():
                price = round2(bounded_amount(value, label=f"Price for {role}"))
                if price < 0:
                    raise ValidationDecline(f"Price for {role} cannot be negative")
                row = self._session.get(RolePrice, role)
                if row is None:
                    self._session.add(RolePrice(business_role=role, price=price))
                else:
                    row.price = price
        logger.info("role prices updated for %s", sorted(prices))
        return self.prices()

    def subscriber_counts(self) -> dict[str, int]:
        rows = self._session.scalars(select(SubscriberCount).order_by(SubscriberCount.id)).all()
        return {row.business_role: row.count for row in rows}

    def set_subscriber_counts(self, counts: Mapping[str, int]) -> dict[str, int]:
        _check_roles(counts)
        with unit_of_work(self._session):
            for role, value in counts.items():
                count = int(value)
                if count < 0:
                    raise ValidationDecline(f"Subscriber count for {role} cannot be negative")
                statement = select(SubscriberCount).where(SubscriberCount.business_role == role)
                row = self._session.scalars(statement).one_or_none()
                if row is None:
                    self._session.add(SubscriberCount(business_role=role, count=count))
                else:
                    row.count = count
        logger.info("subscriber counts updated for %s", sorted(counts))
        return self.subscriber_counts()

    def total_subscribers(self) -> int:
        return sum(self.subscriber_counts().values())


__all__ = ["DEFAULT_ROLE_PRICES", "RoleCatalog"]
