import pytest
from pydantic import ValidationError

from fbgraph import config as config_module
from fbgraph.config import FACEBOOK_ENDPOINT


def test_defaults():
    settings = config_module.reload_settings()

    assert settings.endpoint == FACEBOOK_ENDPOINT
    assert settings.timeout == 30.0
    assert settings.access_token is None
    assert settings.user_fields == "name,email"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FBGRAPH_ACCESS_TOKEN", "env-token")
    monkeypatch.setenv("FBGRAPH_ENDPOINT", "http://localhost:9000/")
    monkeypatch.setenv("FBGRAPH_TIMEOUT", "5")

    settings = config_module.reload_settings()

    assert settings.access_token == "env-token"
    assert settings.endpoint == "http://localhost:9000"
    assert settings.timeout == 5.0


def test_rejects_non_positive_timeout(monkeypatch):
    monkeypatch.setenv("FBGRAPH_TIMEOUT", "0")

    with pytest.raises(ValidationError):
        config_module.reload_settings()


def test_get_settings_is_cached():
    assert config_module.get_settings() is config_module.get_settings()
