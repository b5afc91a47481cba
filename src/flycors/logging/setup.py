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
"""structlog setup driven by the ``flycors.logging`` section.

.. code-block:: yaml

    flycors:
      logging:
        format: json        # or console (default)
        level:
          root: INFO
          flycors.web: DEBUG   # per-logger override
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

import structlog

from flycors.core.config import Config


@dataclass(frozen=True)
class LoggingSettings:
    """The logging options resolved from config."""

    format: str = "console"
    root_level: str = "INFO"
    levels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Config) -> LoggingSettings:
        levels = {str(k): str(v).upper() for k, v in config.get_section("flycors.logging.level").items()}
        return cls(
            format=str(config.get("flycors.logging.format", "console")).lower(),
            root_level=levels.pop("root", "INFO"),
            levels=levels,
        )


def _level(name: str) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(config: Config) -> LoggingSettings:
    """Route structlog through stdlib logging on stderr and apply levels."""
    settings = LoggingSettings.from_config(config)

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if settings.format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=_level(settings.root_level), force=True)

    for name, level in settings.levels.items():
        logging.getLogger(name).setLevel(_level(level))

    return settings
