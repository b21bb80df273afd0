"""Login endpoint and bearer-token dependencies."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from quickride.api.deps import get_db_session, get_hasher
from quickride.core.config import Settings, get_settings
from quickride.models import Shareholder
from quickride.schemas import LoginRequest, LoginResponse, UserInfo
from quickride.schemas.auth import PortalRole
from quickride.services.lifecycle import ShareholderLifecycle
from quickride.services.security import PasswordHasher

router = APIRouter()
security_scheme = HTTPBearer(auto_error=True)


class TokenPayload(BaseModel):
    sub: str
    uid: int
    role: PortalRole
    iat: datetime
    exp: datetime
    jti: str


@dataclass(frozen=True)
class AuthenticatedUser:
    shareholder_id: int
    username: str
    role: PortalRole

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"


def portal_role(shareholder: Shareholder) -> PortalRole:
    return "ADMIN" if shareholder.is_admin else "SHAREHOLDER"


def create_access_token(shareholder: Shareholder, settings: Settings) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": shareholder.username,
        "uid": shareholder.id,
        "role": portal_role(shareholder),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.access_token_expire_minutes)).timestamp()),
        "jti": uuid4().hex,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def _decode_token(*, token: str, settings: Settings) -> TokenPayload:
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc
    try:
        return TokenPayload(**payload)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security_scheme),
) -> AuthenticatedUser:
    payload = _decode_token(token=credentials.credentials, settings=get_settings())
    request.state.actor_username = payload.sub
    return AuthenticatedUser(shareholder_id=payload.uid, username=payload.sub, role=payload.role)


def require_role(*roles: PortalRole) -> Callable[..., AuthenticatedUser]:
    allowed_roles: set[str] = set(roles)

    def dependency(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        if user.role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return dependency


def ensure_self_or_admin(user: AuthenticatedUser, shareholder_id: int) -> None:
    if not user.is_admin and user.shareholder_id != shareholder_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")


@router.post("/login", response_model=LoginResponse, summary="Verify credentials and issue an access token")
async def login(
    payload: LoginRequest,
    request: Request,
    session: Session = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_hasher),
) -> LoginResponse:
    settings = get_settings()
    request.state.actor_username = payload.username or None
    shareholder = await ShareholderLifecycle(session, hasher=hasher).authenticate(
        payload.username, payload.password
    )
    return LoginResponse(
        access_token=create_access_token(shareholder, settings),
        expires_in=settings.access_token_expire_minutes * 60,
        user=UserInfo(
            id=shareholder.id,
            name=shareholder.full_name,
            role=portal_role(shareholder),
            username=shareholder.username,
        ),
    )


__all__ = [
    "AuthenticatedUser",
    "create_access_token",
    "ensure_self_or_admin",
    "get_current_user",
    "require_role",
    "router",
]
