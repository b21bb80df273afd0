"""Business decline hierarchy.

A decline is an expected negative outcome (bad input, unknown record, duplicate,
wrong lifecycle state). The API answers it with a normal response status and
``success: false``. Anything that is not a ``BusinessDecline`` is a system fault.
"""
from __future__ import annotations


class BusinessDecline(Exception):
    """Base class for expected, user-facing negative results."""

    reason: str = "declined"

    def __init__(self, message: str, *, reason: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason

    def to_dict(self) -> dict[str, object]:
        return {"success": False, "kind": "decline", "reason": self.reason, "message": self.message}


class ValidationDecline(BusinessDecline):
    """Raised when supplied values break a business rule."""

    reason = "validation"


class NotFoundDecline(BusinessDecline):
    """Raised when the referenced record does not exist."""

    reason = "not_found"


class DuplicateDecline(BusinessDecline):
    """Raised when a unique value is already taken."""

    reason = "duplicate"


class StateDecline(BusinessDecline):
    """Raised when the record is not in a state that permits the operation."""

    reason = "wrong_state"


class ForbiddenDecline(BusinessDecline):
    """Raised when the operation is never allowed for the target record."""

    reason = "forbidden"


__all__ = [
    "BusinessDecline",
    "DuplicateDecline",
    "ForbiddenDecline",
    "NotFoundDecline",
    "StateDecline",
    "ValidationDecline",
]
