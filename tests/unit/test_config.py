"""
Client Configuration Tests

Tests for ClientConfig loading:
1. Defaults
2. from_dict / from_yaml with partial data
3. Environment overrides
4. Template round trip
"""

import os

import pytest
import yaml

from servicecall.config import (
    ClientConfig,
    HttpConfig,
    get_config_template,
    get_default_config,
    set_default_config,
)
from servicecall.config.runtime import ENV_PREFIX


@pytest.fixture
def clean_env(monkeypatch):
    """Remove SERVICECALL_* variables for the duration of a test."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestClientConfig:
    """Tests for ClientConfig construction."""

    def test_defaults(self):
        config = ClientConfig()
        assert config.base_url == ""
        assert config.http.timeout == 30.0
        assert config.http.verify is True
        assert config.quality.max_status == 500
        assert config.quality.max_duration_s is None

    def test_from_dict_partial(self):
        config = ClientConfig.from_dict({
            "base_url": "https://a",
            "http": {"timeout": 5},
            "options": {"curlSettings": {"verify": False}},
        })
        assert config.base_url == "https://a"
        assert config.http.timeout == 5
        assert config.http.user_agent == HttpConfig().user_agent
        assert config.options == {"curlSettings": {"verify": False}}

    def test_from_dict_unknown_http_key(self):
        with pytest.raises(TypeError):
            ClientConfig.from_dict({"http": {"retries": 3}})

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "servicecall.yaml"
        path.write_text(yaml.safe_dump({
            "base_url": "https://api.example.com",
            "service_name": "users",
            "headers": {"X-Api-Key": "k"},
            "quality": {"max_status": 400, "max_duration_s": 2.5},
        }))
        config = ClientConfig.from_yaml(path)
        assert config.service_name == "users"
        assert config.headers == {"X-Api-Key": "k"}
        assert config.quality.max_status == 400
        assert config.quality.max_duration_s == 2.5

    def test_from_yaml_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ClientConfig.from_yaml(path).base_url == ""

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ClientConfig.from_yaml(tmp_path / "missing.yaml")

    def test_template_round_trip(self):
        data = yaml.safe_load(get_config_template())
        assert ClientConfig.from_dict(data).to_dict() == ClientConfig().to_dict()


class TestEnvOverrides:
    """Tests for environment variable overrides."""

    def test_from_env(self, clean_env):
        clean_env.setenv("SERVICECALL_BASE_URL", "https://env")
        clean_env.setenv("SERVICECALL_TIMEOUT", "7.5")
        clean_env.setenv("SERVICECALL_VERIFY_SSL", "false")
        clean_env.setenv("SERVICECALL_QA_MAX_STATUS", "400")
        clean_env.setenv("SERVICECALL_LOG_LEVEL", "DEBUG")

        config = ClientConfig.from_env()
        assert config.base_url == "https://env"
        assert config.http.timeout == 7.5
        assert config.http.verify is False
        assert config.quality.max_status == 400
        assert config.log_level == "DEBUG"

    def test_with_env_overrides_keeps_file_values(self, clean_env):
        clean_env.setenv("SERVICECALL_SERVICE_NAME", "billing")
        config = ClientConfig(base_url="https://file", http=HttpConfig(timeout=3.0))

        overridden = config.with_env_overrides()
        assert overridden.service_name == "billing"
        assert overridden.base_url == "https://file"
        assert overridden.http.timeout == 3.0
        assert config.service_name is None

    def test_no_overrides_returns_same_config(self, clean_env):
        config = ClientConfig()
        assert config.with_env_overrides() is config


class TestDefaultConfig:
    """Tests for the process default config."""

    def test_set_and_get(self):
        config = ClientConfig(base_url="https://default")
        set_default_config(config)
        try:
            assert get_default_config() is config
        finally:
            set_default_config(None)
