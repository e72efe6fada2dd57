"""
tests/test_config.py -- Unit tests for core/config.py.

Coverage:
  - parse_duration: bare numbers and s/m/h/d suffixes; bad input rejected
  - SECRET_KEY policy: generated in debug, required otherwise, min length
  - JWT_SECRET / JWT_EXPIRY accepted as aliases
  - environment normalization and is_production
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings, parse_duration

GOOD_SECRET = "x" * 32


class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(60, 60), ("60", 60), ("60s", 60), ("5m", 300), ("1h", 3600), ("1d", 86400), (" 2H ", 7200)],
    )
    def test_valid(self, value, expected: int) -> None:
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "5w", "1.5h", "-5", 0, -1, "0s", True])
    def test_invalid(self, value) -> None:
        with pytest.raises(ValueError):
            parse_duration(value)


class TestSecretKeyPolicy:
    def test_generated_in_debug(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SECRET_KEY", raising=False)
        monkeypatch.delenv("JWT_SECRET", raising=False)
        settings = Settings(_env_file=None, debug=True)
        assert len(settings.secret_key) >= 32

    def test_required_outside_debug(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SECRET_KEY", raising=False)
        monkeypatch.delenv("JWT_SECRET", raising=False)
        with pytest.raises(ValidationError, match="SECRET_KEY is required"):
            Settings(_env_file=None, debug=False)

    def test_short_key_rejected(self) -> None:
        with pytest.raises(ValidationError, match="at least 32 characters"):
            Settings(_env_file=None, debug=True, secret_key="too-short")

    def test_explicit_key_kept(self) -> None:
        assert Settings(_env_file=None, secret_key=GOOD_SECRET).secret_key == GOOD_SECRET


class TestEnvironmentAliases:
    def test_jwt_secret_alias(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SECRET_KEY", raising=False)
        monkeypatch.setenv("JWT_SECRET", GOOD_SECRET)
        assert Settings(_env_file=None, debug=False).secret_key == GOOD_SECRET

    def test_jwt_expiry_alias(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TOKEN_EXPIRE_SECONDS", raising=False)
        monkeypatch.setenv("JWT_EXPIRY", "5m")
        assert Settings(_env_file=None, secret_key=GOOD_SECRET).token_expire_seconds == 300

    def test_invalid_expiry_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOKEN_EXPIRE_SECONDS", "soon")
        with pytest.raises(ValidationError):
            Settings(_env_file=None, secret_key=GOOD_SECRET)

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("TOKEN_EXPIRE_SECONDS", "JWT_EXPIRY", "OWNERSHIP_FORBIDDEN", "PORT"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None, secret_key=GOOD_SECRET)
        assert settings.token_expire_seconds == 60
        assert settings.token_header == "auth-token"
        assert settings.ownership_forbidden is False
        assert settings.port == 5000

    def test_environment_normalized(self) -> None:
        settings = Settings(_env_file=None, secret_key=GOOD_SECRET, environment=" Production ")
        assert settings.environment == "production"
        assert settings.is_production
