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
"""PolicyConfig — the immutable CORS policy shared by every request.

Built once at startup from six settings and then only read. All parsing
(comma splitting, case folding, credential flag interpretation) happens
here so that :mod:`flycors.cors.decider` only evaluates.

========================= =============================================
Setting                   Default
========================= =============================================
cors.allowed.origins      ``*``
cors.allowed.methods      ``GET,POST,HEAD,OPTIONS,PUT``
cors.allowed.headers      ``Content-Type,X-Requested-With,accept,Origin,
                          Access-Control-Request-Method,
                          Access-Control-Request-Headers``
cors.exposed.headers      ``Access-Control-Allow-Origin,
                          Access-Control-Allow-Credentials``
cors.support.credentials  ``true``
cors.preflight.maxage     ``1000``
========================= =============================================
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from flycors.cors.tokens import TokenList, split_tokens
from flycors.kernel.exceptions import CorsConfigurationException

if TYPE_CHECKING:
    from flycors.core.config import Config

ALLOWED_ORIGINS_KEY = "cors.allowed.origins"
ALLOWED_METHODS_KEY = "cors.allowed.methods"
ALLOWED_HEADERS_KEY = "cors.allowed.headers"
EXPOSED_HEADERS_KEY = "cors.exposed.headers"
SUPPORT_CREDENTIALS_KEY = "cors.support.credentials"
PREFLIGHT_MAX_AGE_KEY = "cors.preflight.maxage"

SETTING_KEYS: tuple[str, ...] = (
    ALLOWED_ORIGINS_KEY,
    ALLOWED_METHODS_KEY,
    ALLOWED_HEADERS_KEY,
    EXPOSED_HEADERS_KEY,
    SUPPORT_CREDENTIALS_KEY,
    PREFLIGHT_MAX_AGE_KEY,
)

WILDCARD = "*"

DEFAULT_ALLOWED_ORIGINS = WILDCARD
DEFAULT_ALLOWED_METHODS = "GET,POST,HEAD,OPTIONS,PUT"
DEFAULT_ALLOWED_HEADERS = (
    "Content-Type,X-Requested-With,accept,Origin,"
    "Access-Control-Request-Method,Access-Control-Request-Headers"
)
DEFAULT_EXPOSED_HEADERS = "Access-Control-Allow-Origin,Access-Control-Allow-Credentials"
DEFAULT_SUPPORT_CREDENTIALS = True
DEFAULT_PREFLIGHT_MAX_AGE = "1000"


@dataclass(frozen=True)
class PolicyConfig:
    """Immutable CORS policy.

    Attributes:
        allowed_origins: Lower-cased origins, or the ``*`` wildcard.
        allowed_methods: Methods echoed in ``Access-Control-Allow-Methods``.
        allowed_headers: Headers echoed in ``Access-Control-Allow-Headers``.
        exposed_headers: Raw value of ``Access-Control-Expose-Headers``.
        support_credentials: Emit ``Access-Control-Allow-Credentials: true``.
        preflight_max_age: Raw value of ``Access-Control-Max-Age``; never parsed.
    """

    allowed_origins: tuple[str, ...] = (DEFAULT_ALLOWED_ORIGINS,)
    allowed_methods: TokenList = field(default_factory=lambda: TokenList.parse(DEFAULT_ALLOWED_METHODS))
    allowed_headers: TokenList = field(default_factory=lambda: TokenList.parse(DEFAULT_ALLOWED_HEADERS))
    exposed_headers: str = DEFAULT_EXPOSED_HEADERS
    support_credentials: bool = DEFAULT_SUPPORT_CREDENTIALS
    preflight_max_age: str = DEFAULT_PREFLIGHT_MAX_AGE

    def allows_any_origin(self) -> bool:
        return WILDCARD in self.allowed_origins

    def matches_origin(self, origin: str) -> bool:
        """First-match scan: the wildcard, or a case-sensitive exact match."""
        return any(pattern == WILDCARD or origin == pattern for pattern in self.allowed_origins)

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> PolicyConfig:
        """Build a policy from flat ``cors.*`` key/value settings.

        Absent (or ``None``) settings fall back to the defaults. Scalar
        values are read as strings; lists are taken as already split.
        """
        origins = _setting(settings, ALLOWED_ORIGINS_KEY)
        methods = _setting(settings, ALLOWED_METHODS_KEY)
        headers = _setting(settings, ALLOWED_HEADERS_KEY)
        exposed = _setting(settings, EXPOSED_HEADERS_KEY)
        credentials = _setting(settings, SUPPORT_CREDENTIALS_KEY)
        max_age = _setting(settings, PREFLIGHT_MAX_AGE_KEY)

        kwargs: dict[str, Any] = {}
        if origins is not None:
            kwargs["allowed_origins"] = tuple(t.lower() for t in split_tokens(origins))
        if methods is not None:
            kwargs["allowed_methods"] = TokenList.parse(methods)
        if headers is not None:
            kwargs["allowed_headers"] = TokenList.parse(headers)
        if exposed is not None:
            kwargs["exposed_headers"] = exposed if isinstance(exposed, str) else ",".join(exposed)
        if credentials is not None:
            kwargs["support_credentials"] = credentials == "true"
        if max_age is not None:
            if not isinstance(max_age, str):
                raise CorsConfigurationException(
                    f"'{PREFLIGHT_MAX_AGE_KEY}' must be a single value",
                    code="CORS_CONFIG_002",
                    context={"key": PREFLIGHT_MAX_AGE_KEY},
                )
            kwargs["preflight_max_age"] = max_age

        return cls(**kwargs)

    @classmethod
    def from_config(cls, config: Config) -> PolicyConfig:
        """Build a policy from the ``cors.*`` keys of a :class:`Config`."""
        return cls.from_settings({key: config.get(key) for key in SETTING_KEYS})

    def as_settings(self) -> dict[str, str]:
        """Render the policy back into the six flat settings."""
        return {
            ALLOWED_ORIGINS_KEY: ",".join(self.allowed_origins),
            ALLOWED_METHODS_KEY: self.allowed_methods.joined(),
            ALLOWED_HEADERS_KEY: self.allowed_headers.joined(),
            EXPOSED_HEADERS_KEY: self.exposed_headers,
            SUPPORT_CREDENTIALS_KEY: "true" if self.support_credentials else "false",
            PREFLIGHT_MAX_AGE_KEY: self.preflight_max_age,
        }


def _setting(settings: Mapping[str, Any], key: str) -> str | Sequence[str] | None:
    """Normalise one raw setting to ``None``, a string, or a list of strings.

    YAML and TOML hand back typed scalars (``true``, ``10``); they are
    rendered the way they were written so ``true`` stays ``"true"``.
    """
    value = settings.get(key)
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, list | tuple):
        return [str(v) for v in value]
    raise CorsConfigurationException(
        f"Unsupported value for '{key}': expected a string or a list, got {type(value).__name__}",
        code="CORS_CONFIG_001",
        context={"key": key, "type": type(value).__name__},
    )
