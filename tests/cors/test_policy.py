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
"""Tests for PolicyConfig construction from settings and Config."""

from __future__ import annotations

import dataclasses

import pytest

from flycors.core.config import Config
from flycors.cors.policy import (
    DEFAULT_ALLOWED_HEADERS,
    DEFAULT_ALLOWED_METHODS,
    SETTING_KEYS,
    PolicyConfig,
)
from flycors.cors.tokens import TokenList
from flycors.kernel.exceptions import CorsConfigurationException, FlyCorsException


class TestPolicyConfigDefaults:
    def test_defaults(self):
        policy = PolicyConfig()

        assert policy.allowed_origins == ("*",)
        assert policy.allowed_methods.values == ("GET", "POST", "HEAD", "OPTIONS", "PUT")
        assert policy.allowed_headers.values == (
            "Content-Type",
            "X-Requested-With",
            "accept",
            "Origin",
            "Access-Control-Request-Method",
            "Access-Control-Request-Headers",
        )
        assert policy.exposed_headers == "Access-Control-Allow-Origin,Access-Control-Allow-Credentials"
        assert policy.support_credentials is True
        assert policy.preflight_max_age == "1000"

    def test_empty_settings_give_defaults(self):
        assert PolicyConfig.from_settings({}) == PolicyConfig()

    def test_none_values_give_defaults(self):
        assert PolicyConfig.from_settings(dict.fromkeys(SETTING_KEYS)) == PolicyConfig()

    def test_allows_any_origin(self):
        assert PolicyConfig().allows_any_origin()
        assert not PolicyConfig(allowed_origins=("https://a.example",)).allows_any_origin()


class TestPolicyConfigFrozen:
    def test_cannot_modify(self):
        policy = PolicyConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            policy.support_credentials = False  # type: ignore[misc]

        with pytest.raises(dataclasses.FrozenInstanceError):
            policy.allowed_methods.values = ()  # type: ignore[misc]


class TestPolicyConfigFromSettings:
    def test_all_six_settings(self):
        policy = PolicyConfig.from_settings(
            {
                "cors.allowed.origins": "https://A.example , https://b.example",
                "cors.allowed.methods": "GET, Patch",
                "cors.allowed.headers": "X-Token,Content-Type",
                "cors.exposed.headers": "X-Total-Count, X-Page",
                "cors.support.credentials": "false",
                "cors.preflight.maxage": "3600",
            }
        )

        assert policy.allowed_origins == ("https://a.example", "https://b.example")
        assert policy.allowed_methods == TokenList.parse("GET,Patch")
        assert policy.allowed_methods.folded == frozenset({"get", "patch"})
        assert policy.allowed_headers.values == ("X-Token", "Content-Type")
        assert policy.exposed_headers == "X-Total-Count, X-Page"
        assert policy.support_credentials is False
        assert policy.preflight_max_age == "3600"

    @pytest.mark.parametrize("raw", ["false", "TRUE", "True", "yes", "1", ""])
    def test_credentials_only_exact_true(self, raw):
        assert PolicyConfig.from_settings({"cors.support.credentials": raw}).support_credentials is False

    def test_credentials_true(self):
        assert PolicyConfig.from_settings({"cors.support.credentials": "true"}).support_credentials is True

    def test_yaml_scalars_are_rendered_as_written(self):
        policy = PolicyConfig.from_settings(
            {"cors.support.credentials": True, "cors.preflight.maxage": 10}
        )

        assert policy.support_credentials is True
        assert policy.preflight_max_age == "10"

    def test_yaml_false_disables_credentials(self):
        assert PolicyConfig.from_settings({"cors.support.credentials": False}).support_credentials is False

    def test_lists_are_taken_as_split(self):
        policy = PolicyConfig.from_settings(
            {
                "cors.allowed.origins": ["https://App.example"],
                "cors.allowed.methods": ["GET", " PUT "],
                "cors.exposed.headers": ["X-One", "X-Two"],
            }
        )

        assert policy.allowed_origins == ("https://app.example",)
        assert policy.allowed_methods.values == ("GET", "PUT")
        assert policy.exposed_headers == "X-One,X-Two"

    def test_max_age_is_not_validated(self):
        assert PolicyConfig.from_settings({"cors.preflight.maxage": "-5s"}).preflight_max_age == "-5s"

    def test_max_age_list_is_rejected(self):
        with pytest.raises(CorsConfigurationException) as exc_info:
            PolicyConfig.from_settings({"cors.preflight.maxage": [1, 2]})

        assert exc_info.value.code == "CORS_CONFIG_002"

    def test_mapping_value_is_rejected(self):
        with pytest.raises(CorsConfigurationException) as exc_info:
            PolicyConfig.from_settings({"cors.allowed.origins": {"a": 1}})

        assert isinstance(exc_info.value, FlyCorsException)
        assert exc_info.value.code == "CORS_CONFIG_001"
        assert exc_info.value.context == {"key": "cors.allowed.origins", "type": "dict"}

    def test_as_settings_round_trips(self):
        settings = {
            "cors.allowed.origins": "www.example.com",
            "cors.allowed.methods": DEFAULT_ALLOWED_METHODS,
            "cors.allowed.headers": DEFAULT_ALLOWED_HEADERS,
            "cors.exposed.headers": "X-One",
            "cors.support.credentials": "false",
            "cors.preflight.maxage": "10",
        }

        assert PolicyConfig.from_settings(settings).as_settings() == settings


class TestPolicyConfigFromConfig:
    def test_nested_yaml_layout(self):
        config = Config(
            {
                "cors": {
                    "allowed": {"origins": "www.example.com", "methods": "GET,PUT"},
                    "support": {"credentials": False},
                    "preflight": {"maxage": 10},
                }
            }
        )

        policy = PolicyConfig.from_config(config)

        assert policy.allowed_origins == ("www.example.com",)
        assert policy.allowed_methods.values == ("GET", "PUT")
        assert policy.support_credentials is False
        assert policy.preflight_max_age == "10"
        assert policy.allowed_headers == PolicyConfig().allowed_headers

    def test_flat_keys(self):
        config = Config({"cors.allowed.origins": "www.example.com", "cors.preflight.maxage": "5"})

        policy = PolicyConfig.from_config(config)

        assert policy.allowed_origins == ("www.example.com",)
        assert policy.preflight_max_age == "5"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FLYCORS_CORS_ALLOWED_ORIGINS", "https://env.example")
        config = Config({"cors": {"allowed": {"origins": "https://file.example"}}})

        assert PolicyConfig.from_config(config).allowed_origins == ("https://env.example",)
