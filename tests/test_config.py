import pytest

from app.core.config import ConfigurationError, Settings, require_credentials


def test_defaults():
    s = Settings(_env_file=None, gemini_api_key="k")
    assert s.api_port == 3000
    assert s.response_format == "spacing"
    assert s.identity_fallback == "generate"
    assert s.max_history_turns is None


def test_env_aliases(monkeypatch):
    monkeypatch.setenv("API_KEY", "from-env")
    monkeypatch.setenv("PORT", "8123")
    monkeypatch.setenv("RESPONSE_FORMAT", "structured")
    s = Settings(_env_file=None)
    assert s.gemini_api_key == "from-env"
    assert s.api_port == 8123
    assert s.response_format == "structured"


@pytest.mark.parametrize("key", [None, "", "   "])
def test_missing_credential_is_fatal(key):
    with pytest.raises(ConfigurationError):
        require_credentials(Settings(_env_file=None, gemini_api_key=key))


def test_credential_returned_stripped():
    assert require_credentials(Settings(_env_file=None, gemini_api_key=" k ")) == "k"


def test_invalid_response_format_rejected():
    with pytest.raises(Exception):
        Settings(_env_file=None, response_format="fancy")
