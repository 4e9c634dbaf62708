"""Application settings loaded from the environment and an optional .env file.

Environment Variables:
- HTACHAT_PROVIDER: Generation Service backend, "gemini" (default) or "openai"
- HTACHAT_GOOGLE_API_KEY / GOOGLE_API_KEY: Gemini credential
- HTACHAT_OPENAI_API_KEY / OPENAI_API_KEY: OpenAI credential
- HTACHAT_GEMINI_MODEL, HTACHAT_OPENAI_MODEL: model names
- HTACHAT_REQUEST_TIMEOUT: seconds to wait for a reply before giving up
- HTACHAT_DATA_DIR: where the session blob is stored
- HTACHAT_LOCALE: "vi" (default) or "en"
- HTACHAT_LOG_LEVEL, HTACHAT_JSON_LOGS, HTACHAT_DEBUG
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from platformdirs import PlatformDirs
from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

dirs = PlatformDirs("htachat", appauthor=False)


class Settings(BaseSettings):
    """htachat runtime configuration.

    Example:
        >>> settings = Settings(google_api_key="test-key")
        >>> settings.has_api_key()
        True
    """

    model_config = SettingsConfigDict(
        env_prefix="HTACHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Generation Service
    provider: Literal["gemini", "openai"] = Field(
        default="gemini",
        description="Generation Service backend",
    )
    google_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("HTACHAT_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
        description="Google AI Studio API key",
    )
    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("HTACHAT_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="OpenAI API key",
    )
    gemini_model: str = Field(default="gemini-2.0-flash")
    openai_model: str = Field(default="gpt-4o-mini")
    request_timeout: float = Field(
        default=60.0,
        gt=0,
        le=600,
        description="Seconds to wait for a reply before treating the call as failed",
    )

    # Storage
    data_dir: Path = Field(default=Path(dirs.user_data_dir))
    session_store: Literal["file", "memory"] = Field(default="file")

    # Presentation
    locale: str = Field(default="vi")

    # Logging
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)
    debug: bool = Field(default=False)

    def get_api_key_for_provider(self, provider: str | None = None) -> str | None:
        """Return the plain credential for a provider, or None when unset or blank."""
        provider = provider or self.provider
        secret = self.google_api_key if provider == "gemini" else self.openai_api_key
        if secret is None:
            return None
        value = secret.get_secret_value().strip()
        return value or None

    def get_model_for_provider(self, provider: str | None = None) -> str:
        provider = provider or self.provider
        return self.gemini_model if provider == "gemini" else self.openai_model

    def has_api_key(self, provider: str | None = None) -> bool:
        return self.get_api_key_for_provider(provider) is not None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached settings and read the environment again."""
    get_settings.cache_clear()
    return get_settings()
