"""
Runtime Configuration

Central configuration for HTTP clients: base URL, default headers and
options, transport tuning and quality assurance thresholds.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "SERVICECALL_"

_DEFAULT_HTTP_USER_AGENT = "servicecall/0.1"


@dataclass
class HttpConfig:
    """Configuration for the transport."""
    timeout: float = 30.0
    verify: bool = True
    user_agent: str = _DEFAULT_HTTP_USER_AGENT
    proxy: Optional[str] = None


@dataclass
class QualityConfig:
    """Thresholds for the default compliance rules."""
    max_status: int = 500
    max_duration_s: Optional[float] = None


@dataclass
class ClientConfig:
    """
    Complete client configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    base_url: str = ""
    service_name: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)
    http: HttpConfig = field(default_factory=HttpConfig)
    quality: QualityConfig = field(default_factory=QualityConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - SERVICECALL_BASE_URL: Default base URL
        - SERVICECALL_SERVICE_NAME: Service name for attribution
        - SERVICECALL_TIMEOUT: Transport timeout in seconds
        - SERVICECALL_VERIFY_SSL: Verify TLS certificates (true/false)
        - SERVICECALL_USER_AGENT: User-Agent header
        - SERVICECALL_HTTP_PROXY: Proxy URL
        - SERVICECALL_QA_MAX_STATUS: Lowest status flagged as non-compliant
        - SERVICECALL_QA_MAX_DURATION: Duration budget in seconds
        - SERVICECALL_LOG_LEVEL: Log level
        - SERVICECALL_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}BASE_URL"):
            overrides["base_url"] = os.getenv(f"{ENV_PREFIX}BASE_URL")
        if os.getenv(f"{ENV_PREFIX}SERVICE_NAME"):
            overrides["service_name"] = os.getenv(f"{ENV_PREFIX}SERVICE_NAME")

        # Transport settings
        if os.getenv(f"{ENV_PREFIX}TIMEOUT"):
            overrides.setdefault("http", {})["timeout"] = float(os.getenv(f"{ENV_PREFIX}TIMEOUT", "30"))
        if os.getenv(f"{ENV_PREFIX}VERIFY_SSL"):
            overrides.setdefault("http", {})["verify"] = (
                os.getenv(f"{ENV_PREFIX}VERIFY_SSL", "true").lower() == "true"
            )
        if os.getenv(f"{ENV_PREFIX}USER_AGENT"):
            overrides.setdefault("http", {})["user_agent"] = os.getenv(f"{ENV_PREFIX}USER_AGENT")
        if os.getenv(f"{ENV_PREFIX}HTTP_PROXY"):
            overrides.setdefault("http", {})["proxy"] = os.getenv(f"{ENV_PREFIX}HTTP_PROXY")

        # Quality assurance
        if os.getenv(f"{ENV_PREFIX}QA_MAX_STATUS"):
            overrides.setdefault("quality", {})["max_status"] = int(os.getenv(f"{ENV_PREFIX}QA_MAX_STATUS", "500"))
        if os.getenv(f"{ENV_PREFIX}QA_MAX_DURATION"):
            overrides.setdefault("quality", {})["max_duration_s"] = float(os.getenv(f"{ENV_PREFIX}QA_MAX_DURATION", "0"))

        # Logging
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ClientConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClientConfig":
        """Load configuration from a dictionary (supports partial data)."""
        http_data = data.get("http", {})
        quality_data = data.get("quality", {})

        return cls(
            base_url=data.get("base_url", "") or "",
            service_name=data.get("service_name"),
            headers=dict(data.get("headers", {}) or {}),
            options=dict(data.get("options", {}) or {}),
            http=HttpConfig(**http_data) if http_data else HttpConfig(),
            quality=QualityConfig(**quality_data) if quality_data else QualityConfig(),
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}) or {},
        )

    def with_env_overrides(self) -> "ClientConfig":
        """
        Return a new config with environment variable overrides applied.

        Allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("http", "quality"):
            for key, value in overrides.pop(section, {}).items():
                setattr(getattr(new_config, section), key, value)
        for key, value in overrides.items():
            setattr(new_config, key, value)
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "base_url": self.base_url,
            "service_name": self.service_name,
            "headers": dict(self.headers),
            "options": copy.deepcopy(self.options),
            "http": {
                "timeout": self.http.timeout,
                "verify": self.http.verify,
                "user_agent": self.http.user_agent,
                "proxy": self.http.proxy,
            },
            "quality": {
                "max_status": self.quality.max_status,
                "max_duration_s": self.quality.max_duration_s,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


def get_config_template() -> str:
    """Get a template YAML configuration file."""
    return yaml.safe_dump(ClientConfig().to_dict(), sort_keys=False)


# Global default configuration
_default_config: Optional[ClientConfig] = None


def get_default_config() -> ClientConfig:
    """Get the default client configuration."""
    global _default_config
    if _default_config is None:
        _default_config = ClientConfig.from_env()
    return _default_config


def set_default_config(config: ClientConfig) -> None:
    """Set the default client configuration."""
    global _default_config
    _default_config = config
