"""
Tests for the Lettermint client and its configuration
"""

import httpx
import pytest

from lettermint import Lettermint
from lettermint.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, LettermintSettings, get_settings
from lettermint.email import EmailBuilder
from lettermint.exceptions import ErrorKind, InvalidAPITokenError


class TestClientInit:
    """Tests para Lettermint.__init__"""

    def test_valid_token(self):
        client = Lettermint("test-token")
        assert client.api_token == "test-token"
        assert client.base_url == DEFAULT_BASE_URL
        assert client.http_client.timeout == httpx.Timeout(DEFAULT_TIMEOUT)

    @pytest.mark.parametrize("token", ["", None])
    def test_missing_token(self, token):
        with pytest.raises(InvalidAPITokenError) as exc_info:
            Lettermint(token)
        assert exc_info.value.kind is ErrorKind.INVALID_API_TOKEN

    def test_token_from_env(self, monkeypatch):
        monkeypatch.setenv("LETTERMINT_API_TOKEN", "env-token")
        assert Lettermint().api_token == "env-token"

    def test_explicit_token_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("LETTERMINT_API_TOKEN", "env-token")
        assert Lettermint("explicit").api_token == "explicit"

    def test_custom_base_url(self):
        client = Lettermint("test-token", base_url="https://custom.api.com")
        assert client.base_url == "https://custom.api.com"

    def test_base_url_from_env(self, monkeypatch):
        monkeypatch.setenv("LETTERMINT_BASE_URL", "https://staging.example.com/v1")
        assert Lettermint("test-token").base_url == "https://staging.example.com/v1"

    def test_custom_timeout(self):
        client = Lettermint("test-token", timeout=60)
        assert client.http_client.timeout == httpx.Timeout(60)

    def test_custom_http_client(self):
        custom = httpx.Client(timeout=120)
        client = Lettermint("test-token", http_client=custom)
        assert client.http_client is custom
        assert client.http_client.timeout == httpx.Timeout(120)

    def test_timeout_applied_to_custom_http_client(self):
        custom = httpx.Client(timeout=120)
        client = Lettermint("test-token", http_client=custom, timeout=5)
        assert custom.timeout == httpx.Timeout(5)
        assert client.http_client is custom

    def test_user_agent(self):
        assert Lettermint("test-token").user_agent == "lettermint-python/1.0.0"

    def test_repr_hides_token(self):
        assert "test-token" not in repr(Lettermint("test-token"))


class TestClientLifecycle:
    """Tests para close() y el context manager"""

    def test_context_manager_closes_owned_client(self):
        with Lettermint("test-token") as client:
            http_client = client.http_client
        assert http_client.is_closed

    def test_does_not_close_injected_client(self):
        custom = httpx.Client()
        with Lettermint("test-token", http_client=custom):
            pass
        assert not custom.is_closed
        custom.close()


class TestClientEmail:
    """Tests para Lettermint.email"""

    def test_returns_builder(self):
        client = Lettermint("test-token")
        builder = client.email()
        assert isinstance(builder, EmailBuilder)
        assert builder.client is client
        assert builder.payload is not None

    def test_fresh_builder_each_call(self):
        client = Lettermint("test-token")
        assert client.email() is not client.email()
        assert client.email().payload is not client.email().payload


class TestSettings:
    """Tests para LettermintSettings"""

    def test_defaults(self):
        settings = LettermintSettings()
        assert settings.api_token is None
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.timeout == DEFAULT_TIMEOUT
        assert settings.webhook_secret is None
        assert settings.webhook_tolerance == 300
        assert settings.webhook_tolerance_delta.total_seconds() == 300

    def test_secrets_are_masked(self, monkeypatch):
        monkeypatch.setenv("LETTERMINT_WEBHOOK_SECRET", "whsec_abc")
        settings = LettermintSettings()
        assert settings.webhook_secret.get_secret_value() == "whsec_abc"
        assert "whsec_abc" not in repr(settings)

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()

    def test_invalid_timeout_rejected(self, monkeypatch):
        monkeypatch.setenv("LETTERMINT_TIMEOUT", "0")
        with pytest.raises(ValueError):
            LettermintSettings()
