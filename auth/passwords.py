"""
auth/passwords.py -- Argon2 password hashing and verification.

Security design decisions:
  Algorithm: Argon2id through argon2-cffi's PasswordHasher. Argon2 is
       memory-hard, so GPU/ASIC brute force of a leaked table is expensive.
       The output is a self-describing PHC string
       ($argon2id$v=19$m=...,t=...,p=...$salt$hash) that embeds the parameters
       and a fresh salt from os.urandom. Parameter changes therefore never
       invalidate existing hashes.

  Failure modes: verify_password() distinguishes a stored hash that cannot be
       parsed (MalformedHashError) from a wrong password
       (PasswordMismatchError). Both subclass VerifyError, and AuthService
       collapses every VerifyError to InvalidCredentials so the client cannot
       tell them apart.

  Timing equalization: DUMMY_HASH is computed once at module load. Login runs
       verify_password() against it when the username does not exist, so
       response time does not reveal whether an account exists.

Neither function logs or returns the plaintext password.

Layer rule: no imports from api/ or journal/.
"""

from __future__ import annotations

import logging

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

from core.errors import HashError

logger = logging.getLogger("selfdiary.auth")

_PH = PasswordHasher()


class VerifyError(Exception):
    """Base class for password verification failures. Internal to auth/."""


class MalformedHashError(VerifyError):
    """The stored hash could not be parsed as an Argon2 PHC string."""


class PasswordMismatchError(VerifyError):
    """The stored hash is valid but the candidate password does not match."""


def hash_password(plain: str) -> str:
    """Return an Argon2id PHC string for plain. Raises HashError on failure."""
    try:
        return _PH.hash(plain)
    except HashingError as exc:
        raise HashError() from exc


def verify_password(stored_hash: str, plain: str) -> None:
    """Check plain against stored_hash.

    Returns None on success. Raises MalformedHashError when stored_hash is not
    a usable Argon2 hash and PasswordMismatchError when the password is wrong.
    """
    try:
        _PH.verify(stored_hash, plain)
    except VerifyMismatchError as exc:
        raise PasswordMismatchError() from exc
    except (InvalidHashError, VerificationError, ValueError) as exc:
        # ValueError covers a stored hash that is not even ASCII.
        logger.warning("Stored password hash could not be used: %s", type(exc).__name__)
        raise MalformedHashError() from exc


DUMMY_HASH: str = hash_password("self-diary-timing-dummy")
