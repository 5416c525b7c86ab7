from pathlib import Path
from typing import Any, List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]

DEFAULT_NETWORK_ID = "base-sepolia"

LLM_KEY_ENV_VARS = {
    "anthropic": "ANTHROPIC_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
}


class ConfigurationError(Exception):
    """Raised when required environment variables are missing."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            "Required environment variables are not set: " + ", ".join(self.missing)
        )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # LLM Provider Settings
    llm_provider: str = Field(default="anthropic", description="LLM provider driving the agent")
    llm_model: str = Field(default="claude-sonnet-4-20250514", description="LLM model identifier")
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key",
        validation_alias=AliasChoices("anthropic_api_key", "ANTHROPIC_API_KEY", "llm_api_key", "LLM_API_KEY"),
    )
    max_tokens: int = Field(default=4000, description="Maximum tokens for LLM response")
    temperature: float = Field(default=0.7, description="LLM temperature setting")
    max_tool_rounds: int = Field(default=5, ge=1, description="Maximum tool-calling rounds per message")
    session_id: str = Field(default="coinscout-chat", description="Conversation thread identifier")

    # Wallet (Coinbase Developer Platform)
    cdp_api_key_name: str = Field(default="", description="CDP API key name")
    cdp_api_key_private_key: str = Field(default="", description="CDP API private key")
    network_id: str = Field(default="", description="Network the wallet operates on")
    wallet_data_file: Path = Field(
        default=Path("wallet_data.txt"),
        description="File holding the exported wallet data",
    )

    # Market data
    coingecko_api_key: str = Field(default="", description="Coingecko API key")
    coingecko_base_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        description="Coingecko API base URL",
    )
    default_analysis_limit: int = Field(default=10, ge=1, le=250, description="Default number of coins to analyze")

    # Trend data
    apify_keywords_api_key: str = Field(default="", description="Apify token for the trending keywords dataset")
    apify_dataset_id: str = Field(default="0VEWlmNYYkmymxOC3", description="Apify dataset holding trending keywords")
    apify_base_url: str = Field(default="https://api.apify.com/v2", description="Apify API base URL")

    request_timeout_seconds: int = Field(default=15, description="Upstream request timeout")

    # Conversation loop
    autonomous_interval_seconds: float = Field(default=10, gt=0, description="Seconds between autonomous cycles")

    @property
    def has_coingecko_key(self) -> bool:
        return bool(self.coingecko_api_key)

    @property
    def has_apify_key(self) -> bool:
        return bool(self.apify_keywords_api_key)

    @property
    def has_llm_key(self) -> bool:
        """Check if we have an API key for the configured LLM provider"""
        if self.llm_provider.lower() in ["anthropic", "claude"]:
            return bool(self.anthropic_api_key)
        return False

    @property
    def llm_api_key(self) -> str:
        return self.anthropic_api_key

    @property
    def effective_network_id(self) -> str:
        return self.network_id or DEFAULT_NETWORK_ID

    @property
    def cdp_private_key(self) -> str:
        """The CDP private key with escaped newlines expanded."""
        return self.cdp_api_key_private_key.replace("\\n", "\n")

    def missing_required(self) -> List[str]:
        missing: List[str] = []
        if not self.has_llm_key:
            missing.append(LLM_KEY_ENV_VARS.get(self.llm_provider.lower(), "LLM_API_KEY"))
        if not self.cdp_api_key_name:
            missing.append("CDP_API_KEY_NAME")
        if not self.cdp_api_key_private_key:
            missing.append("CDP_API_KEY_PRIVATE_KEY")
        return missing

    def validate_environment(self) -> List[str]:
        """Raise ConfigurationError for missing required values, return warnings otherwise."""
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(missing)

        warnings: List[str] = []
        if not self.network_id:
            warnings.append(f"NETWORK_ID not set, defaulting to {DEFAULT_NETWORK_ID} testnet")
        return warnings


def load_settings(**overrides: Any) -> Settings:
    """Build the settings object handed to every component at startup."""
    return Settings(**overrides)


def redact(settings: Settings, extra: Optional[List[str]] = None) -> dict:
    data = settings.model_dump()
    for key in ["anthropic_api_key", "cdp_api_key_private_key", "coingecko_api_key", "apify_keywords_api_key", *(extra or [])]:
        if data.get(key):
            data[key] = "***REDACTED***"
    return data
