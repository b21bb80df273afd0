"""ORM models package."""
from .base import Base, TimestampMixin
from .dividend import DividendRecord, DividendStatus, ImmutableRecordError
from .investment_stage import InvestmentStage, StageStatus
from .role_settings import RolePrice, SubscriberCount
from .shareholder import SUBSCRIBER_ROLES, BusinessRole, Shareholder, ShareholderStatus

__all__ = [
    "Base",
    "BusinessRole",
    "DividendRecord",
    "DividendStatus",
    "ImmutableRecordError",
    "InvestmentStage",
    "RolePrice",
    "SUBSCRIBER_ROLES",
    "Shareholder",
    "ShareholderStatus",
    "StageStatus",
    "SubscriberCount",
    "TimestampMixin",
]
