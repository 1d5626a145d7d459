"""
auth/service.py -- Registration and login orchestration.

AuthService composes the credential rules (auth/validation.py), the Argon2
hasher (auth/passwords.py) and UserStore. It knows nothing about HTTP or
sessions: login() returns the identity, and the route binds it to the session
through auth/session.py.

Ordering in register() is fixed: username rules, password rules, hash, insert.
The first failure propagates unchanged, and a bad username never pays for an
Argon2 hash.

Login never reveals whether a username exists: the unknown-user path verifies
against DUMMY_HASH and raises the same InvalidCredentials as a wrong password.

Layer rule: no imports from api/ or journal/.
"""

from __future__ import annotations

import logging

from auth.models import Identity
from auth.passwords import DUMMY_HASH, VerifyError, hash_password, verify_password
from auth.store import UserStore
from auth.validation import validate_password_strength, validate_username
from core.errors import InvalidCredentials

logger = logging.getLogger("selfdiary.auth")


class AuthService:
    def __init__(self, user_store: UserStore) -> None:
        self.user_store = user_store

    def register(self, username: str, password: str) -> int:
        """Create an account and return the new user id.

        Raises ValidationError, HashError, UsernameTaken or StoreError.
        """
        validate_username(username)
        validate_password_strength(password)
        password_hash = hash_password(password)
        user_id = self.user_store.create_user(username, password_hash)
        logger.info("Registered user id=%d", user_id)
        return user_id

    def login(self, username: str, password: str) -> Identity:
        """Return the identity for a correct username/password pair.

        Raises InvalidCredentials for an unknown username and for a wrong
        password alike. StoreError from the lookup propagates.
        """
        user = self.user_store.get_by_username(username)
        if user is None:
            # Equalize timing -- do NOT return before running Argon2
            try:
                verify_password(DUMMY_HASH, password)
            except VerifyError:
                pass
            raise InvalidCredentials()

        try:
            verify_password(user.password_hash, password)
        except VerifyError as exc:
            raise InvalidCredentials() from exc

        return Identity(user_id=user.id, username=user.username)
