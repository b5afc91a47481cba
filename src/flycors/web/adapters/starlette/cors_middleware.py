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
"""CorsMiddleware — runs the CorsDecider in front of a Starlette/ASGI app.

The decision is made before the request continues, into a staging header
set. When the downstream app starts its response, staged headers are
merged in; a header the handler already set is left alone.

Responses produced outside this middleware carry no CORS headers. In a
Starlette application that includes the 500 page rendered by
``ServerErrorMiddleware`` for an unhandled exception.
"""

from __future__ import annotations

from collections.abc import Sequence
from fnmatch import fnmatch

import structlog
from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from flycors.cors.decider import CorsDecider, CorsOutcome
from flycors.cors.policy import PolicyConfig

logger = structlog.get_logger("flycors.web")


class CorsMiddleware:
    """Pure ASGI middleware adding ``Access-Control-*`` headers to admitted requests.

    The wrapped app always runs and its status code is never changed.

    Args:
        app: The downstream ASGI application.
        policy: CORS policy; defaults to :class:`PolicyConfig` defaults.
        url_patterns: Glob patterns of paths to handle. Empty means all paths.
        exclude_patterns: Glob patterns of paths to skip, checked after
            ``url_patterns``.
    """

    def __init__(
        self,
        app: ASGIApp,
        policy: PolicyConfig | None = None,
        url_patterns: Sequence[str] = (),
        exclude_patterns: Sequence[str] = (),
    ) -> None:
        self.app = app
        self._decider = CorsDecider(policy)
        self.url_patterns = tuple(url_patterns)
        self.exclude_patterns = tuple(exclude_patterns)

    @property
    def policy(self) -> PolicyConfig:
        return self._decider.policy

    def applies_to(self, path: str) -> bool:
        if self.url_patterns and not any(fnmatch(path, p) for p in self.url_patterns):
            return False
        return not any(fnmatch(path, p) for p in self.exclude_patterns)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.applies_to(scope["path"]):
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        staged = MutableHeaders()
        outcome = self._decider.decide(request, staged)

        if outcome is not CorsOutcome.NOT_CORS:
            logger.debug(
                "cors_" + outcome.value,
                method=request.method,
                path=scope["path"],
                origin=request.headers.get("origin"),
            )

        if not staged.raw:
            await self.app(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                headers = MutableHeaders(scope=message)
                for name, value in staged.items():
                    if name not in headers:
                        headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_cors)
