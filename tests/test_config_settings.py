import pytest

from coinscout.config import ConfigurationError, DEFAULT_NETWORK_ID, Settings, redact

ENV_VARS = [
    "ANTHROPIC_API_KEY",
    "LLM_API_KEY",
    "CDP_API_KEY_NAME",
    "CDP_API_KEY_PRIVATE_KEY",
    "NETWORK_ID",
    "COINGECKO_API_KEY",
    "APIFY_KEYWORDS_API_KEY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_missing_required_lists_every_name():
    """All missing required variables are reported together."""

    settings = Settings(_env_file=None)

    with pytest.raises(ConfigurationError) as excinfo:
        settings.validate_environment()

    assert excinfo.value.missing == ["ANTHROPIC_API_KEY", "CDP_API_KEY_NAME", "CDP_API_KEY_PRIVATE_KEY"]
    assert "CDP_API_KEY_NAME" in str(excinfo.value)


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "llm")
    monkeypatch.setenv("CDP_API_KEY_NAME", "name")
    monkeypatch.setenv("CDP_API_KEY_PRIVATE_KEY", "line1\\nline2")
    monkeypatch.setenv("NETWORK_ID", "base-mainnet")

    settings = Settings(_env_file=None)

    assert settings.validate_environment() == []
    assert settings.effective_network_id == "base-mainnet"
    assert settings.cdp_private_key == "line1\nline2"


def test_missing_network_id_only_warns(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "llm")
    monkeypatch.setenv("CDP_API_KEY_NAME", "name")
    monkeypatch.setenv("CDP_API_KEY_PRIVATE_KEY", "key")

    settings = Settings(_env_file=None)

    warnings = settings.validate_environment()
    assert len(warnings) == 1
    assert "NETWORK_ID" in warnings[0]
    assert settings.effective_network_id == DEFAULT_NETWORK_ID == "base-sepolia"


def test_llm_key_alias(monkeypatch):
    """A generic LLM_API_KEY is accepted for the configured provider."""

    monkeypatch.setenv("LLM_API_KEY", "from-alias")

    settings = Settings(_env_file=None)

    assert settings.has_llm_key
    assert "ANTHROPIC_API_KEY" not in settings.missing_required()


def test_optional_keys_default_empty():
    settings = Settings(_env_file=None)

    assert not settings.has_coingecko_key
    assert not settings.has_apify_key
    assert settings.default_analysis_limit == 10
    assert settings.autonomous_interval_seconds == 10


def test_redact_hides_secrets(settings):
    data = redact(settings)

    assert data["anthropic_api_key"] == "***REDACTED***"
    assert data["cdp_api_key_private_key"] == "***REDACTED***"
    assert data["cdp_api_key_name"] == "test-key-name"
