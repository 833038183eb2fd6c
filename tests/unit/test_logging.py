"""Tests for logging configuration."""

import logging
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

from src.config import Settings
from src.logging_config import mask_pii, setup_logfire


class TestMaskPii:
    """Test mask_pii()."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, ""),
            ("", ""),
            ("abc", "***"),
            ("abcd", "****"),
            ("abcde", "ab*de"),
            ("EAAGm0PX4ZCpsBA", "EA***********BA"),
        ],
    )
    def test_mask_pii(self, value, expected):
        assert mask_pii(value) == expected

    def test_custom_mask_char(self):
        assert mask_pii("secret", mask_char="#") == "se##et"


class TestSetupLogfire:
    """Test setup_logfire()."""

    def _settings(self, **overrides) -> Settings:
        values = {"token": "t", "access_token": "a", "_env_file": None}
        values.update(overrides)
        return Settings(**values)

    def test_configures_and_instruments(self):
        app = FastAPI()
        mock_logfire = MagicMock()

        with (
            patch("src.logging_config.logfire", mock_logfire),
            patch("src.logging_config.logging.basicConfig") as basic_config,
        ):
            setup_logfire(app, self._settings(env="prod", log_level="debug"))

        mock_logfire.configure.assert_called_once_with(environment="prod")
        mock_logfire.instrument_fastapi.assert_called_once_with(app)
        mock_logfire.instrument_httpx.assert_called_once_with()
        mock_logfire.instrument_pydantic.assert_called_once_with()
        basic_config.assert_called_once_with(level=logging.DEBUG, format="%(message)s")

    def test_token_is_passed_when_configured(self):
        mock_logfire = MagicMock()

        with (
            patch("src.logging_config.logfire", mock_logfire),
            patch("src.logging_config.logging.basicConfig"),
        ):
            setup_logfire(FastAPI(), self._settings(logfire_token="lf-token"))

        mock_logfire.configure.assert_called_once_with(
            environment="local", token="lf-token"
        )

    def test_local_uses_console_format_and_falls_back_to_info(self):
        with (
            patch("src.logging_config.logfire", MagicMock()),
            patch("src.logging_config.logging.basicConfig") as basic_config,
        ):
            setup_logfire(FastAPI(), self._settings(log_level="chatty"))

        basic_config.assert_called_once_with(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
