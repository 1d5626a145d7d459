"""
auth/validation.py -- Username and password shape rules.

Pure functions, no I/O. Both raise core.errors.ValidationError with a message
that is shown to the client verbatim, and return None when the input is
acceptable.

Layer rule: no imports from api/ or journal/.
"""

from __future__ import annotations

import re

from core.errors import ValidationError

# Starts with a letter, ends with a letter or digit, 3-20 chars total.
_USERNAME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9._-]{1,18}[a-zA-Z0-9]")
_SPECIAL_CHARS = frozenset("._-")

_PASSWORD_MIN_LENGTH = 8
_PASSWORD_RULE_MESSAGE = (
    "Password must be at least 8 characters long, contain upper and lower case "
    "letters, a digit, and a special character"
)


def _is_ascii_letter_or_digit(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def validate_username(username: str) -> None:
    """Reject usernames outside the allowed shape.

    The regex alone accepts runs such as 'a..b' or 'a_-b'; the second pass
    rejects any two adjacent characters that are both in {'.', '_', '-'}.
    fullmatch() is used so a trailing newline cannot slip past '$'.
    """
    if _USERNAME_RE.fullmatch(username) is None:
        raise ValidationError("Invalid username format.")

    if any(a in _SPECIAL_CHARS and b in _SPECIAL_CHARS for a, b in zip(username, username[1:])):
        raise ValidationError("Username cannot have consecutive special characters.")


def validate_password_strength(password: str) -> None:
    """Require 8+ UTF-8 bytes plus an upper, a lower, a digit and a symbol (all ASCII classes).

    Every condition is evaluated; the client always gets the same message.
    """
    checks = (
        len(password.encode("utf-8")) >= _PASSWORD_MIN_LENGTH,
        any(ch.isascii() and ch.isupper() for ch in password),
        any(ch.isascii() and ch.islower() for ch in password),
        any(ch.isascii() and ch.isdigit() for ch in password),
        any(not _is_ascii_letter_or_digit(ch) for ch in password),
    )
    if not all(checks):
        raise ValidationError(_PASSWORD_RULE_MESSAGE)
