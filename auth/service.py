"""
auth/service.py -- Registration, login and user lookup.

AuthService composes the credential store, the password hasher and the
token service. Both register() and login() return only the token string;
the password hash never leaves this layer.

Enumeration safety:
  login() answers "Incorrect email or password" for an unknown email and for
  a wrong password alike. For an unknown email it still runs one bcrypt
  verification against a dummy hash made with the same work factor, so the
  response time does not reveal whether the account exists.

Layer rule: no imports from api/ or notes/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.passwords import PasswordHasher
from auth.store import UserStore
from auth.tokens import TokenService
from core.exceptions import DuplicateEmailError, InvalidCredentialsError, NotFoundError, store_errors

logger = logging.getLogger("notekeeper.auth")


class AuthService:
    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenService) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self._dummy_hash: str | None = None

    def _timing_dummy(self) -> str:
        # Built on first use so startup does not pay for a bcrypt round.
        if self._dummy_hash is None:
            self._dummy_hash = self.hasher.hash("notekeeper_timing_dummy")
        return self._dummy_hash

    def _issue(self, user: User) -> str:
        return self.tokens.issue(user.id, user.name, user.email)

    def register(self, name: str, email: str, password: str) -> str:
        """Create an account and return a token for it.

        Raises DuplicateEmailError if the email is already registered,
        including when a concurrent request wins the insert race.
        """
        with store_errors(logger, "creating user"):
            if self.store.email_exists(email):
                logger.error("Registration rejected: email already in use")
                raise DuplicateEmailError()

            user = User(name=name, email=email, hashed_password=self.hasher.hash(password))
            try:
                user.id = self.store.create_user(user)
            except IntegrityError as exc:
                logger.error("Registration rejected: email already in use (concurrent insert)")
                raise DuplicateEmailError() from exc
            created = self.store.get_by_id(user.id) or user

        logger.info("User created and token generated successfully")
        return self._issue(created)

    def login(self, email: str, password: str) -> str:
        """Check credentials and return a fresh token.

        Raises InvalidCredentialsError for an unknown email or a wrong
        password -- one error, one message.
        """
        with store_errors(logger, "logging in user"):
            user = self.store.get_by_email(email)

        if user is None:
            self.hasher.verify(password, self._timing_dummy())
            logger.error("Login rejected: incorrect email or password")
            raise InvalidCredentialsError()
        if not self.hasher.verify(password, user.hashed_password):
            logger.error("Login rejected: incorrect email or password")
            raise InvalidCredentialsError()

        logger.info("User logged in and token generated successfully")
        return self._issue(user)

    def get_user(self, user_id: str) -> User:
        """Return the stored user. Raises NotFoundError if it no longer exists."""
        with store_errors(logger, "fetching user details"):
            user = self.store.get_by_id(user_id)
        if user is None:
            logger.error("User not found")
            raise NotFoundError("User not found")
        return user
