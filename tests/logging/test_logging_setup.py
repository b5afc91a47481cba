# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for configure_logging and LoggingSettings."""

import logging

import pytest
import structlog

from flycors.core.config import Config
from flycors.logging.setup import LoggingSettings, configure_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    web_level = logging.getLogger("flycors.web").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("flycors.web").setLevel(web_level)
    structlog.reset_defaults()


class TestLoggingSettings:
    def test_defaults(self):
        settings = LoggingSettings.from_config(Config({}))
        assert settings.format == "console"
        assert settings.root_level == "INFO"
        assert settings.levels == {}

    def test_read_from_config(self):
        config = Config(
            {"flycors": {"logging": {"format": "JSON", "level": {"root": "debug", "flycors.web": "warning"}}}}
        )

        settings = LoggingSettings.from_config(config)

        assert settings.format == "json"
        assert settings.root_level == "DEBUG"
        assert settings.levels == {"flycors.web": "WARNING"}

    def test_format_env_override(self, monkeypatch):
        monkeypatch.setenv("FLYCORS_LOGGING_FORMAT", "json")
        assert LoggingSettings.from_config(Config({})).format == "json"


class TestConfigureLogging:
    def test_returns_settings(self):
        settings = configure_logging(Config({"flycors": {"logging": {"format": "json"}}}))
        assert settings.format == "json"

    def test_applies_root_level(self):
        configure_logging(Config({"flycors": {"logging": {"level": {"root": "DEBUG"}}}}))
        assert logging.getLogger().level == logging.DEBUG

    def test_applies_per_logger_levels(self):
        configure_logging(Config({"flycors": {"logging": {"level": {"flycors.web": "ERROR"}}}}))
        assert logging.getLogger("flycors.web").level == logging.ERROR

    def test_unknown_level_falls_back_to_info(self):
        configure_logging(Config({"flycors": {"logging": {"level": {"root": "LOUD"}}}}))
        assert logging.getLogger().level == logging.INFO

    def test_json_output(self, capsys):
        configure_logging(Config({"flycors": {"logging": {"format": "json"}}}))

        structlog.get_logger("flycors.test").info("cors_policy_loaded", allowed_origins=["*"])

        err = capsys.readouterr().err
        assert '"event": "cors_policy_loaded"' in err
        assert '"logger": "flycors.test"' in err
        assert '"level": "info"' in err
