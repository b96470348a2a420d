"""
Configuration loading for servicecall clients.
"""

from .runtime import (
    ClientConfig,
    HttpConfig,
    QualityConfig,
    get_config_template,
    get_default_config,
    set_default_config,
)

__all__ = [
    "ClientConfig",
    "HttpConfig",
    "QualityConfig",
    "get_config_template",
    "get_default_config",
    "set_default_config",
]
