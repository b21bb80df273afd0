"""Transaction scoping helpers that do not depend on the global engine."""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or roll all of it back."""

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


__all__ = ["unit_of_work"]
