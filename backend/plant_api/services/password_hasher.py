"""
Plant API — Password Hasher
============================

What:  One-way salted password hashing and verification.
How:   passlib's CryptContext with the bcrypt scheme. Every hash() call draws
       a fresh random salt; the salt and the cost factor are embedded in the
       resulting string, so verify() needs nothing but the stored hash.
Who:   AuthService (registration and login).

Cost factor:
    bcrypt rounds = 10 by default (2^10 key-expansion iterations), set from
    BCRYPT_ROUNDS. Hashes created with another cost still verify.

Failure model:
    A wrong password is `False`. Anything else that goes wrong (malformed
    stored hash, backend failure) raises PasswordHashError, which the API
    reports as a 500, never as "invalid credentials".
"""

import logging

from passlib.context import CryptContext

from plant_api.exceptions import PasswordHashError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    Thin wrapper around a bcrypt CryptContext.

    Both operations are CPU-bound (tens of milliseconds at cost 10);
    async callers run them in the threadpool.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        """Return a salted bcrypt digest of `plaintext`."""
        try:
            return self._context.hash(plaintext)
        except Exception as e:
            logger.error("Password hashing failed: %s", type(e).__name__)
            raise PasswordHashError(
                message="Could not process the password. Please try again later.",
                context={"error_type": type(e).__name__},
            ) from e

    def verify(self, plaintext: str, password_hash: str) -> bool:
        """
        Check `plaintext` against a stored digest.

        Returns:
            True iff the password matches.

        Raises:
            PasswordHashError if the stored hash cannot be interpreted.
        """
        try:
            return self._context.verify(plaintext, password_hash)
        except Exception as e:
            logger.error("Password verification failed: %s", type(e).__name__)
            raise PasswordHashError(
                message="Could not verify the password. Please try again later.",
                context={"error_type": type(e).__name__},
            ) from e

    def dummy_verify(self) -> None:
        """Spend the time of one verification without checking anything."""
        self._context.dummy_verify()
