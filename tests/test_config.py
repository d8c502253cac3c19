"""
Tests for pipeline configuration (pydantic-settings).
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from blobpipe.config import (
    RECOMMENDED_STRIPE_LENGTHS,
    PipelineSettings,
    configure_settings,
    get_settings,
    reset_settings,
)
from blobpipe.store.base import DEFAULT_MAX_COMPOSE_SOURCES, DEFAULT_READ_CHUNK_SIZE


class TestPipelineSettings:
    """Tests for PipelineSettings pydantic-settings model."""

    def test_default_values(self):
        settings = PipelineSettings()

        # Composition defaults
        assert settings.compose_fan_in == 32
        assert settings.seed_size == 1024 * 1024
        assert settings.object_suffix == ".bin"

        # Download defaults
        assert settings.stripe_length == 8 * 1024 * 1024
        assert settings.max_parallel_stripes == 8
        assert settings.read_chunk_size == 256 * 1024

        # Logging defaults
        assert settings.log_level == "INFO"
        assert settings.log_json is False

    def test_defaults_follow_shared_constants(self):
        settings = PipelineSettings()

        assert settings.compose_fan_in == DEFAULT_MAX_COMPOSE_SOURCES
        assert settings.read_chunk_size == DEFAULT_READ_CHUNK_SIZE
        assert settings.stripe_length == RECOMMENDED_STRIPE_LENGTHS[0]

    def test_recommended_stripe_lengths(self):
        assert RECOMMENDED_STRIPE_LENGTHS == (8_388_608, 16_777_216, 33_554_432)

    def test_environment_variable_override(self):
        env = {
            "BLOBPIPE_STRIPE_LENGTH": "16777216",
            "BLOBPIPE_MAX_PARALLEL_STRIPES": "32",
            "BLOBPIPE_LOG_JSON": "true",
        }
        with patch.dict(os.environ, env):
            settings = PipelineSettings()

        assert settings.stripe_length == 16 * 1024 * 1024
        assert settings.max_parallel_stripes == 32
        assert settings.log_json is True

    def test_unknown_environment_ignored(self):
        with patch.dict(os.environ, {"BLOBPIPE_NOT_A_SETTING": "1"}):
            PipelineSettings()

    @pytest.mark.parametrize(
        "field, value",
        [
            ("compose_fan_in", 1),
            ("stripe_length", 0),
            ("max_parallel_stripes", 0),
            ("max_parallel_stripes", 1000),
            ("log_level", "TRACE"),
        ],
    )
    def test_validation(self, field, value):
        with pytest.raises(ValidationError):
            PipelineSettings(**{field: value})


class TestSettingsSingleton:
    """Tests for the cached settings accessors."""

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_configure_settings(self):
        settings = configure_settings(compose_fan_in=4)

        assert settings.compose_fan_in == 4
        assert get_settings() is settings

    def test_reset_rereads_environment(self):
        first = get_settings()
        with patch.dict(os.environ, {"BLOBPIPE_COMPOSE_FAN_IN": "8"}):
            reset_settings()
            second = get_settings()

        assert second is not first
        assert second.compose_fan_in == 8
