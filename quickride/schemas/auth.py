"""Schemas for the login endpoint."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from .common import SuccessResponse

PortalRole = Literal["ADMIN", "SHAREHOLDER"]


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class UserInfo(BaseModel):
    id: int
    name: str
    role: PortalRole
    username: str


class LoginResponse(SuccessResponse):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserInfo


__all__ = ["LoginRequest", "LoginResponse", "PortalRole", "UserInfo"]
