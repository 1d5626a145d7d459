"""
core/errors.py -- Error taxonomy shared by auth/, journal/ and api/.

Every domain failure is a DiaryError subclass carrying a stable machine code
and a message that is safe to show to a client. The HTTP status for each code
lives in api/main.py, so nothing under core/, auth/ or journal/ knows about
HTTP.

Client-correctable errors (ValidationError, UsernameTaken, InvalidCredentials,
Unauthorized) surface their message verbatim. Server-fault errors (StoreError,
HashError, SessionError) keep the underlying exception on __cause__ for the
log, and the client only ever sees the generic message defined here.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or journal/.
"""

from __future__ import annotations


class DiaryError(Exception):
    """Base class for all per-request failures. Never fatal to the process."""

    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(DiaryError):
    """Username or password does not satisfy the credential rules."""

    code = "validation_error"
    message = "Invalid input."


class UsernameTaken(DiaryError):
    code = "username_taken"
    message = "Username is already taken"


class InvalidCredentials(DiaryError):
    """Login failure. Identical for unknown usernames and wrong passwords."""

    code = "bad_credentials"
    message = "Invalid username or password."


class Unauthorized(DiaryError):
    """Session identity does not match the claimed resource owner."""

    code = "unauthorized"
    message = "Unauthorized access."


class StoreError(DiaryError):
    code = "database_error"
    message = "Database error."


class HashError(DiaryError):
    code = "password_hash_error"
    message = "Password hash error."


class SessionError(DiaryError):
    code = "session_error"
    message = "Session error."
