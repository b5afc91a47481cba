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
"""CorsDecider — per-request CORS admission and response header emission.

Implements the resource processing model of the W3C CORS recommendation
(sections 6.1 "simple / actual request" and 6.2 "preflight request"):

1. No ``Origin`` header: not a CORS request, nothing is emitted.
2. ``Origin`` not in the allowed list: nothing is emitted.
3. ``OPTIONS`` with ``Access-Control-Request-Method``: the requested
   method and every requested header must be allowed, otherwise nothing
   is emitted. On success the preflight headers are added.
   ``OPTIONS`` *without* that header is answered like an actual request.
4. Allow-Origin (echoing the request's Origin), Expose-Headers and,
   when enabled, Allow-Credentials.

The decider never raises and never blocks a request; rejection means
the browser receives no CORS headers.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from flycors.cors.policy import PolicyConfig
from flycors.cors.tokens import split_tokens

# Request headers
ORIGIN = "Origin"
ACCESS_CONTROL_REQUEST_METHOD = "Access-Control-Request-Method"
ACCESS_CONTROL_REQUEST_HEADERS = "Access-Control-Request-Headers"

# Response headers
ACCESS_CONTROL_ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ACCESS_CONTROL_EXPOSE_HEADERS = "Access-Control-Expose-Headers"
ACCESS_CONTROL_ALLOW_METHODS = "Access-Control-Allow-Methods"
ACCESS_CONTROL_ALLOW_HEADERS = "Access-Control-Allow-Headers"
ACCESS_CONTROL_MAX_AGE = "Access-Control-Max-Age"
ACCESS_CONTROL_ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"

RESPONSE_HEADERS: tuple[str, ...] = (
    ACCESS_CONTROL_ALLOW_ORIGIN,
    ACCESS_CONTROL_EXPOSE_HEADERS,
    ACCESS_CONTROL_ALLOW_METHODS,
    ACCESS_CONTROL_ALLOW_HEADERS,
    ACCESS_CONTROL_MAX_AGE,
    ACCESS_CONTROL_ALLOW_CREDENTIALS,
)

PREFLIGHT_METHOD = "OPTIONS"


@runtime_checkable
class RequestView(Protocol):
    """What the decider reads from a request.

    Starlette's ``Request`` satisfies this directly; its ``headers`` are
    case-insensitive.
    """

    method: str

    @property
    def headers(self) -> Mapping[str, str]: ...


@runtime_checkable
class ResponseSink(Protocol):
    """Single-valued header writes; setting a name twice overwrites it."""

    def __setitem__(self, name: str, value: str) -> None: ...


class CorsOutcome(StrEnum):
    """How a request was classified. The request proceeds in every case."""

    NOT_CORS = "not_cors"
    ORIGIN_REJECTED = "origin_rejected"
    PREFLIGHT_REJECTED = "preflight_rejected"
    ACTUAL_ADMITTED = "actual_admitted"
    PREFLIGHT_ADMITTED = "preflight_admitted"

    @property
    def admitted(self) -> bool:
        return self in (CorsOutcome.ACTUAL_ADMITTED, CorsOutcome.PREFLIGHT_ADMITTED)


class CorsDecider:
    """Evaluates requests against one shared, read-only :class:`PolicyConfig`.

    Safe to call concurrently: ``decide`` keeps no state between calls.
    """

    __slots__ = ("_allow_headers", "_allow_methods", "_policy")

    def __init__(self, policy: PolicyConfig | None = None) -> None:
        self._policy = policy or PolicyConfig()
        self._allow_methods = self._policy.allowed_methods.joined()
        self._allow_headers = self._policy.allowed_headers.joined()

    @property
    def policy(self) -> PolicyConfig:
        return self._policy

    def decide(self, request: RequestView, response: ResponseSink) -> CorsOutcome:
        """Classify *request* and write the CORS headers it earns into *response*."""
        policy = self._policy

        origin = _header(request, ORIGIN)
        if origin is None:
            return CorsOutcome.NOT_CORS

        if not policy.matches_origin(origin):
            return CorsOutcome.ORIGIN_REJECTED

        preflight = False
        if request.method == PREFLIGHT_METHOD:
            requested_method = _header(request, ACCESS_CONTROL_REQUEST_METHOD)
            if requested_method is not None:
                requested_headers = split_tokens(_header(request, ACCESS_CONTROL_REQUEST_HEADERS))

                if not policy.allowed_methods.contains(requested_method):
                    return CorsOutcome.PREFLIGHT_REJECTED

                if not all(policy.allowed_headers.contains(h) for h in requested_headers):
                    return CorsOutcome.PREFLIGHT_REJECTED

                response[ACCESS_CONTROL_ALLOW_METHODS] = self._allow_methods
                response[ACCESS_CONTROL_ALLOW_HEADERS] = self._allow_headers
                response[ACCESS_CONTROL_MAX_AGE] = policy.preflight_max_age
                preflight = True

        response[ACCESS_CONTROL_ALLOW_ORIGIN] = origin
        response[ACCESS_CONTROL_EXPOSE_HEADERS] = policy.exposed_headers

        if policy.support_credentials:
            response[ACCESS_CONTROL_ALLOW_CREDENTIALS] = "true"

        return CorsOutcome.PREFLIGHT_ADMITTED if preflight else CorsOutcome.ACTUAL_ADMITTED


def decide(policy: PolicyConfig, request: RequestView, response: ResponseSink) -> CorsOutcome:
    """One-shot form of :meth:`CorsDecider.decide`."""
    return CorsDecider(policy).decide(request, response)


def _header(request: Any, name: str) -> str | None:
    """Read one header, treating anything that is not a string as absent."""
    value = request.headers.get(name)
    return value if isinstance(value, str) else None
