"""
tests/test_auth_service.py -- Unit tests for auth/service.py (AuthService).

Coverage:
  - register returns a token that verifies to the new user's id
  - duplicate email (pre-check and lost insert race) -> DuplicateEmailError
  - login succeeds only for a known email with the right password;
    unknown email and wrong password raise the identical error
  - unknown email still spends one bcrypt verification
  - get_user on a vanished id -> NotFoundError
  - store failures surface as InternalError
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenService
from core.exceptions import DuplicateEmailError, InternalError, InvalidCredentialsError, NotFoundError

SECRET = "service-test-secret-key-of-32-chars-min"


@pytest.fixture()
def tokens() -> TokenService:
    return TokenService(SECRET, expire_seconds=3600)


@pytest.fixture()
def service(user_store: UserStore, hasher: PasswordHasher, tokens: TokenService) -> AuthService:
    return AuthService(user_store, hasher, tokens)


class TestRegister:
    def test_token_identifies_new_user(self, service: AuthService, tokens: TokenService) -> None:
        token = service.register("Alice", "alice@example.com", "secret1")
        claims = tokens.verify(token)
        user = service.get_user(claims.user_id)
        assert user.email == "alice@example.com"
        assert claims.name == "Alice"
        assert claims.email == "alice@example.com"

    def test_password_stored_hashed(self, service: AuthService, user_store: UserStore) -> None:
        service.register("Alice", "alice@example.com", "secret1")
        stored = user_store.get_by_email("alice@example.com")
        assert stored.hashed_password != "secret1"
        assert PasswordHasher.is_hash(stored.hashed_password)

    def test_duplicate_email(self, service: AuthService) -> None:
        service.register("Alice", "alice@example.com", "secret1")
        with pytest.raises(DuplicateEmailError) as exc_info:
            service.register("Alice Two", "alice@example.com", "other12")
        assert exc_info.value.status_code == 400
        assert exc_info.value.name == "DuplicateEmail"

    def test_duplicate_email_lost_race(self, hasher: PasswordHasher, tokens: TokenService) -> None:
        """A concurrent insert that wins the race still yields DuplicateEmail."""
        store = MagicMock(spec=UserStore)
        store.email_exists.return_value = False
        store.create_user.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        with pytest.raises(DuplicateEmailError):
            AuthService(store, hasher, tokens).register("Alice", "alice@example.com", "secret1")


class TestLogin:
    def test_success(self, service: AuthService, tokens: TokenService) -> None:
        registered = tokens.verify(service.register("Alice", "alice@example.com", "secret1"))
        claims = tokens.verify(service.login("alice@example.com", "secret1"))
        assert claims.user_id == registered.user_id

    def test_email_case_insensitive(self, service: AuthService) -> None:
        service.register("Alice", "alice@example.com", "secret1")
        assert service.login("ALICE@Example.com", "secret1")

    def test_wrong_password_and_unknown_email_identical(self, service: AuthService) -> None:
        service.register("Alice", "alice@example.com", "secret1")
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            service.login("alice@example.com", "wrong-password")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            service.login("nobody@example.com", "secret1")
        assert wrong_password.value.to_dict() == unknown_email.value.to_dict()
        assert wrong_password.value.message == "Incorrect email or password"

    def test_unknown_email_still_verifies(self, user_store: UserStore, tokens: TokenService) -> None:
        hasher = MagicMock(spec=PasswordHasher)
        hasher.hash.return_value = PasswordHasher(rounds=4).hash("dummy")
        hasher.verify.return_value = False
        with pytest.raises(InvalidCredentialsError):
            AuthService(user_store, hasher, tokens).login("nobody@example.com", "secret1")
        hasher.verify.assert_called_once()


class TestGetUser:
    def test_missing_user(self, service: AuthService) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            service.get_user("does-not-exist")
        assert exc_info.value.message == "User not found"


class TestStoreFailures:
    def _broken_store(self) -> MagicMock:
        store = MagicMock(spec=UserStore)
        failure = OperationalError("SELECT", {}, Exception("database is locked"))
        store.email_exists.side_effect = failure
        store.get_by_email.side_effect = failure
        store.get_by_id.side_effect = failure
        return store

    def test_register(self, hasher: PasswordHasher, tokens: TokenService) -> None:
        with pytest.raises(InternalError) as exc_info:
            AuthService(self._broken_store(), hasher, tokens).register("Alice", "alice@example.com", "secret1")
        assert exc_info.value.status_code == 500
        assert "locked" not in exc_info.value.message

    def test_login(self, hasher: PasswordHasher, tokens: TokenService) -> None:
        with pytest.raises(InternalError):
            AuthService(self._broken_store(), hasher, tokens).login("alice@example.com", "secret1")

    def test_get_user(self, hasher: PasswordHasher, tokens: TokenService) -> None:
        with pytest.raises(InternalError):
            AuthService(self._broken_store(), hasher, tokens).get_user("u1")
