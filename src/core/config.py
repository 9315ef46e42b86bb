"""Application configuration using Pydantic Settings.

Environment variables are loaded with the CONSENSUS_BRIDGE_ prefix, and an
optional .env file in the working directory is honoured.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.constants import Timeouts


def _default_participant_models() -> dict[str, str]:
    return {
        "chatgpt": "gpt-4o",
        "claude": "claude-sonnet",
        "gemini": "gemini-pro",
        "deepseek": "deepseek-coder",
        "qwen": "qwen-coder",
        "kimi": "kimi-chat",
    }


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service configuration
    service_name: str = "consensus-bridge"
    port: int = 3210
    environment: str = Field(default="development", description="Runtime environment")
    log_level: str = Field(default="INFO", description="Logging level")

    # Inference service (OpenAI-compatible chat completions)
    inference_base_url: str = Field(
        default="http://localhost:8085",
        description="Inference service base URL"
    )
    inference_timeout_seconds: float = Field(
        default=Timeouts.INFERENCE_REQUEST,
        gt=0,
        description="HTTP timeout for a single completion request"
    )

    # Participants
    participant_models: dict[str, str] = Field(
        default_factory=_default_participant_models,
        description="Participant name to model id for every participant to register"
    )
    participant_max_retries: int = Field(
        default=2,
        ge=0,
        description="Extra attempts a participant makes after a failed generation"
    )
    participant_retry_delay_seconds: float = Field(
        default=3.0,
        ge=0,
        description="Pause between participant retries"
    )

    # Reconciliation
    participant_timeout_seconds: float = Field(
        default=Timeouts.PARTICIPANT_PROPOSAL,
        gt=0,
        description="Per-participant proposal timeout"
    )
    enable_critique: bool = Field(
        default=True,
        description="Run the peer-agreement confidence pass"
    )
    min_responses: int = Field(
        default=1,
        ge=1,
        description="Minimum proposals required to build a consensus"
    )
    reference_participant: str = Field(
        default="chatgpt",
        description="Participant preferred by the judge fallback"
    )

    model_config = SettingsConfigDict(
        env_prefix="CONSENSUS_BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings singleton
    """
    return Settings()
