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
"""'flycors check' — evaluate one request against the configured policy."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import click
from rich.table import Table

from flycors.cli.console import console
from flycors.cli.options import config_options, load_policy
from flycors.cors.decider import (
    ACCESS_CONTROL_REQUEST_HEADERS,
    ACCESS_CONTROL_REQUEST_METHOD,
    ORIGIN,
    RESPONSE_HEADERS,
    CorsDecider,
)


@dataclass(frozen=True)
class SimulatedRequest:
    """A request described on the command line."""

    method: str
    headers: dict[str, str] = field(default_factory=dict)


@click.command()
@config_options
@click.option("--origin", default=None, help="Value of the Origin header (omit for a same-origin request).")
@click.option("--method", "method", default="GET", show_default=True, help="HTTP method of the request.")
@click.option("--request-method", default=None, help="Access-Control-Request-Method (preflight).")
@click.option("--request-headers", default=None, help="Access-Control-Request-Headers (preflight).")
@click.option("--json", "as_json", is_flag=True, help="Print the outcome and headers as JSON.")
def check_command(
    config_path: Path | None,
    profiles: tuple[str, ...],
    origin: str | None,
    method: str,
    request_method: str | None,
    request_headers: str | None,
    as_json: bool,
) -> None:
    """Show which CORS headers a request would receive."""
    _, policy = load_policy(config_path, profiles)

    headers: dict[str, str] = {}
    if origin is not None:
        headers[ORIGIN] = origin
    if request_method is not None:
        headers[ACCESS_CONTROL_REQUEST_METHOD] = request_method
    if request_headers is not None:
        headers[ACCESS_CONTROL_REQUEST_HEADERS] = request_headers

    sink: dict[str, str] = {}
    outcome = CorsDecider(policy).decide(SimulatedRequest(method=method, headers=headers), sink)
    emitted = {name: sink[name] for name in RESPONSE_HEADERS if name in sink}

    if as_json:
        click.echo(json.dumps({"outcome": outcome.value, "headers": emitted}, indent=2))
        return

    style = "success" if outcome.admitted else "warning"
    console.print(f"\nOutcome: [{style}]{outcome.value}[/{style}]\n")

    if not emitted:
        console.print("[dim]No Access-Control-* headers would be sent.[/dim]\n")
        return

    table = Table(title="Response headers", border_style="dim")
    table.add_column("Header", style="info")
    table.add_column("Value")
    for name, value in emitted.items():
        table.add_row(name, value)
    console.print(table)
    console.print()
