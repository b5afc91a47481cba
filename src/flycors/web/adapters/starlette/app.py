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
"""Starlette application factory with CORS handling installed."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from flycors.core.config import Config
from flycors.cors.policy import PolicyConfig
from flycors.web.adapters.starlette.cors_middleware import CorsMiddleware

logger = structlog.get_logger("flycors.web")


def create_app(
    routes: Sequence[BaseRoute] = (),
    policy: PolicyConfig | None = None,
    config: Config | None = None,
    middleware: Sequence[Middleware] = (),
    cors_url_patterns: Sequence[str] = (),
    cors_exclude_patterns: Sequence[str] = (),
    debug: bool = False,
    lifespan: Any = None,
) -> Starlette:
    """Create a Starlette application whose responses pass through :class:`CorsMiddleware`.

    The policy comes from *policy* when given, otherwise from the ``cors.*``
    keys of *config*.  With neither, no CORS middleware is installed.

    Preflight requests are answered by the routes themselves, so every
    route that browsers preflight must accept ``OPTIONS``; otherwise the
    router answers 405 and the browser discards the preflight.

    Args:
        routes: Application routes.
        policy: A ready-made CORS policy.
        config: Configuration to build the policy from.
        middleware: Further middleware, run inside the CORS middleware.
        cors_url_patterns: Glob patterns limiting which paths get CORS headers.
        cors_exclude_patterns: Glob patterns of paths that never get CORS headers.
        debug: Starlette debug mode.
        lifespan: Optional Starlette lifespan context.
    """
    if policy is None and config is not None:
        policy = PolicyConfig.from_config(config)

    stack: list[Middleware] = []
    if policy is not None:
        stack.append(
            Middleware(
                CorsMiddleware,
                policy=policy,
                url_patterns=cors_url_patterns,
                exclude_patterns=cors_exclude_patterns,
            )
        )
        logger.info(
            "cors_policy_loaded",
            allowed_origins=list(policy.allowed_origins),
            allowed_methods=policy.allowed_methods.joined(),
            support_credentials=policy.support_credentials,
            preflight_max_age=policy.preflight_max_age,
        )
        if policy.allows_any_origin() and policy.support_credentials:
            logger.warning(
                "cors_wildcard_with_credentials",
                detail="every origin is echoed back with Access-Control-Allow-Credentials: true",
            )
    stack.extend(middleware)

    return Starlette(
        debug=debug,
        routes=list(routes),
        middleware=stack,
        lifespan=lifespan,
    )
