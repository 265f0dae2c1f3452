"""Password hashing and verification (bcrypt via passlib)."""

from __future__ import annotations

from passlib.context import CryptContext
from passlib.exc import UnknownHashError
from starlette.concurrency import run_in_threadpool

DEFAULT_BCRYPT_ROUNDS = 12


class PasswordHasher:
    """Salted bcrypt hashing with a configurable work factor.

    Every call to :meth:`hash` draws a fresh salt, which bcrypt embeds in
    the output string, so hashing the same password twice gives two
    different results. :meth:`verify` reads the salt back from the stored
    hash.
    """

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )
        self._dummy_hash: str | None = None

    def hash(self, plain: str) -> str:
        return self._context.hash(plain)

    def verify(self, plain: str, hashed: str | None) -> bool:
        """Return True only if ``plain`` matches ``hashed``.

        A malformed or unrecognised stored hash counts as a mismatch.
        """
        if not hashed:
            return False
        try:
            return self._context.verify(plain, hashed)
        except (UnknownHashError, ValueError, TypeError):
            return False

    def dummy_verify(self, plain: str) -> bool:
        """Burn one verification against a throwaway hash; always False.

        Used when the user does not exist so login timing matches the
        wrong-password path.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self._context.hash("dummy-password-0")
        self._context.verify(plain, self._dummy_hash)
        return False

    async def hash_async(self, plain: str) -> str:
        return await run_in_threadpool(self.hash, plain)

    async def verify_async(self, plain: str, hashed: str | None) -> bool:
        return await run_in_threadpool(self.verify, plain, hashed)

    async def dummy_verify_async(self, plain: str) -> bool:
        return await run_in_threadpool(self.dummy_verify, plain)
