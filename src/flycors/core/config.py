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
"""Settings for FlyCors: a YAML or TOML file, profile overlays, and env vars.

The ``cors.*`` keys can be written nested (``cors: {allowed: {origins: ...}}``)
or as flat dotted keys (``"cors.allowed.origins": ...``), the layout of
servlet-style init parameters.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from flycors.kernel.exceptions import CorsConfigurationException

ENV_PREFIX = "FLYCORS_"


class Config:
    """Read-only settings with dotted-key lookup.

    ``get(key)`` looks in this order:
    1. The environment variable named by :meth:`env_key`.
    2. A literal flat key.
    3. The nested path.
    """

    def __init__(self, data: dict[str, Any] | None = None, sources: Sequence[str] = ()) -> None:
        self._data: dict[str, Any] = dict(data or {})
        self._sources = tuple(sources)

    @property
    def loaded_sources(self) -> tuple[str, ...]:
        """Files merged into this config, in merge order."""
        return self._sources

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: Sequence[str] = ()) -> Config:
        """Load *path*, then each ``<stem>-<profile><suffix>`` overlay that exists.

        Later files win key by key; missing files are skipped.
        """
        path = Path(path)
        candidates = [path] + [path.with_name(f"{path.stem}-{p}{path.suffix}") for p in active_profiles]

        data: dict[str, Any] = {}
        sources: list[str] = []
        for candidate in candidates:
            if candidate.is_file():
                data = _merge(data, _read(candidate))
                sources.append(str(candidate))
        return cls(data, sources)

    @staticmethod
    def env_key(key: str) -> str:
        """``cors.allowed.origins`` -> ``FLYCORS_CORS_ALLOWED_ORIGINS``."""
        return ENV_PREFIX + key.removeprefix("flycors.").upper().replace(".", "_").replace("-", "_")

    def get(self, key: str, default: Any = None) -> Any:
        env_val = os.environ.get(self.env_key(key))
        if env_val is not None:
            return env_val

        if key in self._data:
            value = self._data[key]
        else:
            value = self._data
            for part in key.split("."):
                if not isinstance(value, dict) or part not in value:
                    return default
                value = value[part]

        return default if value is None else value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """The nested mapping under *prefix*, or an empty dict."""
        section = self.get(prefix)
        return section if isinstance(section, dict) else {}


def _read(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with open(path, "rb") as f:
            data = tomllib.load(f)
    else:
        with open(path) as f:
            data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CorsConfigurationException(
            f"{path}: expected a mapping at the top level, got {type(data).__name__}",
            code="CORS_CONFIG_003",
            context={"path": str(path)},
        )
    return data


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged
