"""Password hashing capability injected into the shareholder lifecycle."""
from __future__ import annotations

from typing import Protocol

import bcrypt
from fastapi.concurrency import run_in_threadpool

# bcrypt only looks at the first 72 bytes and 5.x rejects anything longer.
MAX_PASSWORD_BYTES = 72


class PasswordHasher(Protocol):
    """One-way, salted password hashing."""

    async def hash(self, plaintext: str) -> str:
        """Return an opaque hash for ``plaintext``."""

    async def verify(self, plaintext: str, hashed: str) -> bool:
        """Return whether ``plaintext`` matches ``hashed``."""


class BcryptPasswordHasher:
    """bcrypt hasher whose CPU-bound work runs in the worker thread pool."""

    def __init__(self, *, rounds: int = 10) -> None:
        self._rounds = rounds

    def hash_sync(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")

    def verify_sync(self, plaintext: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:  # malformed stored hash
            return False

    async def hash(self, plaintext: str) -> str:
        return await run_in_threadpool(self.hash_sync, plaintext)

    async def verify(self, plaintext: str, hashed: str) -> bool:
        return await run_in_threadpool(self.verify_sync, plaintext, hashed)


__all__ = ["MAX_PASSWORD_BYTES", "BcryptPasswordHasher", "PasswordHasher"]
