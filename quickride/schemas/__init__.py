"""Pydantic schemas package."""

from .auth import LoginRequest, LoginResponse, UserInfo
from .common import DeclineResponse, FaultResponse, MessageResponse, SuccessResponse
from .dashboard import (
    AdminDashboardResponse,
    PricesResponse,
    PricesUpdate,
    ShareholderDashboardResponse,
    SubscribersResponse,
    SubscribersUpdate,
)
from .dividend import (
    AllocationRead,
    DistributionRead,
    DividendCreate,
    DividendDistribute,
    DividendHistory,
    DividendRead,
    PayoutRead,
)
from .shareholder import (
    AgreementCreate,
    AgreementCreated,
    CredentialsUpdate,
    CredentialsUpdated,
    ShareholderDetail,
    ShareholderDetailResponse,
    ShareholderSummary,
    StatusUpdate,
    StatusUpdated,
)
from .stage import RunningStageRead, RunningStageResponse, StageList, StageRead, StageSaved, StageUpsert

__all__ = [
    "AdminDashboardResponse",
    "AgreementCreate",
    "AgreementCreated",
    "AllocationRead",
    "CredentialsUpdate",
    "CredentialsUpdated",
    "DeclineResponse",
    "DistributionRead",
    "DividendCreate",
    "DividendDistribute",
    "DividendHistory",
    "DividendRead",
    "FaultResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PayoutRead",
    "PricesResponse",
    "PricesUpdate",
    "RunningStageRead",
    "RunningStageResponse",
    "ShareholderDashboardResponse",
    "ShareholderDetail",
    "ShareholderDetailResponse",
    "ShareholderSummary",
    "StageList",
    "StageRead",
    "StageSaved",
    "StageUpsert",
    "StatusUpdate",
    "StatusUpdated",
    "SubscribersResponse",
    "SubscribersUpdate",
    "SuccessResponse",
    "UserInfo",
]
