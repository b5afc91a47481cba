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
"""'flycors policy' — display the effective CORS policy."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from flycors.cli.console import console
from flycors.cli.options import config_options, load_policy


@click.command()
@config_options
def policy_command(config_path: Path | None, profiles: tuple[str, ...]) -> None:
    """Print the six CORS settings after defaults and overrides are applied."""
    config, policy = load_policy(config_path, profiles)

    for source in config.loaded_sources:
        console.print(f"[dim]loaded {source}[/dim]")

    table = Table(title="Effective CORS policy", show_header=False, border_style="dim")
    table.add_column("Setting", style="info")
    table.add_column("Value")
    for key, value in policy.as_settings().items():
        table.add_row(key, value)
    console.print(table)

    if policy.allows_any_origin() and policy.support_credentials:
        console.print("[warning]Any origin may send credentialed requests.[/warning]")
