"""
Configuration management for the Learning AI layer.

Provider selection and credentials come from environment variables (or a
.env file) through Pydantic settings. The orchestrator itself only receives
the immutable AiProviderConfig derived from them.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from learning_ai.utils.constants import (
    DEFAULT_GROQ_MODEL,
    DEFAULT_OPENAI_MODEL,
    KNOWN_FALLBACK_POLICIES,
    KNOWN_PROVIDERS,
    POLICY_GROQ_LOCAL,
    PROVIDER_OPENAI,
)


class AiProviderConfig(BaseModel):
    """
    Provider selection for one orchestrator.

    Values are trimmed and lower-cased. An unknown provider falls back to
    'openai' and an unknown policy to 'groq_local'.
    """

    model_config = ConfigDict(frozen=True)

    configured_provider: str = PROVIDER_OPENAI
    strict_mode: bool = False
    fallback_policy: str = POLICY_GROQ_LOCAL

    @field_validator("configured_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value) -> str:
        provider = str(value or "").strip().lower()
        return provider if provider in KNOWN_PROVIDERS else PROVIDER_OPENAI

    @field_validator("fallback_policy", mode="before")
    @classmethod
    def _normalize_policy(cls, value) -> str:
        policy = str(value or "").strip().lower()
        return policy if policy in KNOWN_FALLBACK_POLICIES else POLICY_GROQ_LOCAL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Provider Selection
    ai_provider: str = Field(
        default=PROVIDER_OPENAI,
        description="Primary AI provider: openai, groq or local"
    )
    ai_strict_mode: bool = Field(
        default=False,
        description="Raise instead of falling back when the primary provider fails"
    )
    ai_fallback_provider: str = Field(
        default=POLICY_GROQ_LOCAL,
        description="Fallback policy: groq_local or local_only"
    )

    # OpenAI Configuration
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key (empty disables the provider)"
    )
    openai_model: str = Field(
        default=DEFAULT_OPENAI_MODEL,
        description="OpenAI model to use"
    )

    # Groq Configuration
    groq_api_key: str = Field(
        default="",
        description="Groq API key (empty disables the provider)"
    )
    groq_model: str = Field(
        default=DEFAULT_GROQ_MODEL,
        description="Groq model to use"
    )

    # Application Settings
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def provider_config(self) -> AiProviderConfig:
        """Immutable provider selection derived from these settings."""
        return AiProviderConfig(
            configured_provider=self.ai_provider,
            strict_mode=self.ai_strict_mode,
            fallback_policy=self.ai_fallback_provider,
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    Returns:
        Settings: Application settings
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None
