"""Unit tests for core configuration.

Pattern: Pydantic Settings testing
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.core.config import Settings, get_settings


class TestSettings:
    """Tests for Settings configuration class."""

    def test_settings_default_values(self) -> None:
        """Field defaults, read from the model so the environment cannot interfere."""
        fields = Settings.model_fields

        assert fields["service_name"].default == "consensus-bridge"
        assert fields["port"].default == 3210
        assert fields["inference_base_url"].default == "http://localhost:8085"
        assert fields["participant_timeout_seconds"].default == 120.0
        assert fields["enable_critique"].default is True
        assert fields["min_responses"].default == 1
        assert fields["reference_participant"].default == "chatgpt"
        assert fields["log_level"].default == "INFO"
        assert fields["environment"].default == "development"

    def test_default_participant_models_cover_every_participant(self) -> None:
        models = Settings.model_fields["participant_models"].default_factory()

        assert set(models) == {"chatgpt", "claude", "gemini", "deepseek", "qwen", "kimi"}

    def test_settings_from_environment(self) -> None:
        env_vars = {
            "CONSENSUS_BRIDGE_INFERENCE_BASE_URL": "http://gpu.internal:9000",
            "CONSENSUS_BRIDGE_PARTICIPANT_TIMEOUT_SECONDS": "30",
            "CONSENSUS_BRIDGE_ENABLE_CRITIQUE": "false",
            "CONSENSUS_BRIDGE_PARTICIPANT_MODELS": '{"qwen": "qwen2.5-coder"}',
        }

        with patch.dict(os.environ, env_vars, clear=False):
            settings = Settings()

        assert settings.inference_base_url == "http://gpu.internal:9000"
        assert settings.participant_timeout_seconds == 30.0
        assert settings.enable_critique is False
        assert settings.participant_models == {"qwen": "qwen2.5-coder"}

    def test_settings_env_prefix(self) -> None:
        """Non-prefixed variables are not read."""
        env_vars = {
            "MIN_RESPONSES": "5",
            "CONSENSUS_BRIDGE_MIN_RESPONSES": "2",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            settings = Settings()

        assert settings.min_responses == 2

    @pytest.mark.parametrize(
        "overrides",
        [
            {"participant_timeout_seconds": 0},
            {"min_responses": 0},
            {"participant_max_retries": -1},
        ],
    )
    def test_settings_reject_invalid_values(self, overrides: dict[str, float]) -> None:
        with pytest.raises(ValidationError):
            Settings(**overrides)


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_returns_settings(self) -> None:
        assert isinstance(get_settings(), Settings)

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
