from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings.

    Values may be provided via environment variables. Provider credentials also
    accept the bare vendor variable names (``OPENAI_API_KEY``,
    ``DEEPSEEK_API_KEY``) so existing shells keep working.
    """

    # HTTP
    cors_allow_origins: str = Field("*", description="Comma-separated origins")

    # Providers
    active_provider: str = Field("deepseek", description="openai|deepseek|deepseek-reasoner")
    openai_endpoint: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-4o"
    openai_api_key: str = Field(
        "",
        validation_alias=AliasChoices("INSIGHT_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    deepseek_endpoint: str = "https://api.deepseek.com/v1/chat/completions"
    deepseek_model: str = "deepseek-chat"
    deepseek_reasoner_model: str = "deepseek-reasoner"
    deepseek_api_key: str = Field(
        "",
        validation_alias=AliasChoices("INSIGHT_DEEPSEEK_API_KEY", "DEEPSEEK_API_KEY"),
    )

    # Generation
    request_timeout_s: float = Field(30.0, gt=0, description="Per-call timeout for provider requests")
    analysis_temperature: float = Field(0.3, ge=0.0, le=2.0)
    analysis_max_tokens: int = Field(1000, ge=64, description="Output cap for structured analysis")

    class Config:
        env_prefix = "INSIGHT_"
        case_sensitive = False
        populate_by_name = True


def load_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
