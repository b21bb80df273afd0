"""Envelope schemas shared by every endpoint."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    success: Literal[True] = True


class MessageResponse(SuccessResponse):
    message: str


class DeclineResponse(BaseModel):
    success: Literal[False] = False
    kind: Literal["decline"] = "decline"
    reason: str
    message: str


class FaultResponse(BaseModel):
    success: Literal[False] = False
    kind: Literal["fault"] = "fault"
    message: str


__all__ = ["DeclineResponse", "FaultResponse", "MessageResponse", "SuccessResponse"]
