"""
auth/passwords.py -- bcrypt password hashing.

Using bcrypt directly rather than passlib[bcrypt] because passlib's internal
wrap-bug detection creates a password longer than 72 bytes, which bcrypt 4.x
rejects with an explicit error.

Every call to hash() draws a fresh salt from bcrypt.gensalt(), so two hashes
of the same password never match as strings. The work factor (rounds) is
configurable: the default of 10 matches what existing accounts were hashed
with, and tests drop it to 4 to stay fast.

Passwords longer than 72 bytes are rejected at the API layer (Pydantic
validator) because bcrypt only considers the first 72 bytes.

Layer rule: no imports from api/ or notes/.
"""

from __future__ import annotations

import re

import bcrypt

_MIN_ROUNDS = 4
_MAX_ROUNDS = 31

# $2a$, $2b$ and $2y$ prefixes, two-digit cost, 53 chars of salt + digest.
_BCRYPT_RE = re.compile(r"^\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}$")


class PasswordHasher:
    """One-way salted password hashing with a tunable work factor.

    Usage:
        hasher = PasswordHasher(rounds=10)
        digest = hasher.hash("secret1")
        hasher.verify("secret1", digest)   # True
    """

    def __init__(self, rounds: int = 10) -> None:
        if not _MIN_ROUNDS <= rounds <= _MAX_ROUNDS:
            raise ValueError(f"bcrypt rounds must be between {_MIN_ROUNDS} and {_MAX_ROUNDS}, got {rounds}")
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash of the given plaintext password."""
        return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if the plaintext password matches the bcrypt hash.

        A malformed hash or an over-long password returns False rather than
        raising; to the caller both simply mean "does not match".
        """
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    @staticmethod
    def is_hash(value: str) -> bool:
        """Return True if value has the shape of a bcrypt hash."""
        return bool(_BCRYPT_RE.match(value or ""))
