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
"""Options shared by the commands that load a policy."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from flycors.core.config import Config
from flycors.cors.policy import PolicyConfig
from flycors.kernel.exceptions import CorsConfigurationException
from flycors.logging.setup import configure_logging


def config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach ``--config`` and ``--profile`` to a command."""
    func = click.option(
        "--profile",
        "profiles",
        multiple=True,
        help="Active profile overlay (repeatable).",
    )(func)
    return click.option(
        "--config",
        "config_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="YAML or TOML file holding the cors.* settings.",
    )(func)


def load_policy(config_path: Path | None, profiles: tuple[str, ...]) -> tuple[Config, PolicyConfig]:
    """Load configuration, set up logging, and build the policy.

    Without ``--config`` the policy is built from defaults and
    ``FLYCORS_CORS_*`` environment variables only.
    """
    if config_path is not None and not config_path.is_file():
        raise click.BadParameter(f"file not found: {config_path}", param_hint="--config")

    try:
        config = Config.from_file(config_path, active_profiles=profiles) if config_path else Config()
        configure_logging(config)
        return config, PolicyConfig.from_config(config)
    except CorsConfigurationException as exc:
        raise click.ClickException(str(exc)) from exc
