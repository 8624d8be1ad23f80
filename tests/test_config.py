"""Unit tests for core/config.py -- SECRET_KEY policy and environment flags."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings


class TestSecretKeyPolicy:
    def test_debug_generates_key(self) -> None:
        settings = Settings(debug=True, secret_key="")
        assert len(settings.secret_key) >= 32

    def test_missing_key_outside_debug_refuses_to_start(self) -> None:
        with pytest.raises(ValidationError, match="SECRET_KEY is required"):
            Settings(debug=False, secret_key="")

    def test_short_key_rejected(self) -> None:
        with pytest.raises(ValidationError, match="at least 32 characters"):
            Settings(debug=True, secret_key="short")

    def test_bcrypt_rounds_floor(self) -> None:
        with pytest.raises(ValidationError, match="BCRYPT_ROUNDS"):
            Settings(secret_key="k" * 32, bcrypt_rounds=3)


class TestEnvironment:
    @pytest.mark.parametrize("environment", ["development", "local", "test", "TEST"])
    def test_local_environments(self, environment: str) -> None:
        assert Settings(environment=environment, secret_key="k" * 32).is_local

    def test_production_is_not_local(self) -> None:
        assert not Settings(environment="production", secret_key="k" * 32).is_local

    def test_defaults(self) -> None:
        settings = Settings(secret_key="k" * 32, _env_file=None)
        assert settings.token_expire_seconds == 3600
        assert settings.cookie_name == "jwt"
        assert settings.api_rate_limit == "100 per 15 minutes"
        assert settings.auth_rate_limit == "50 per hour"
