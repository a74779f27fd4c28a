"""
Configuration loader for the ChannelApe client CLI.

Loads configuration from YAML files and environment variables with nested
key access. Environment variables win over YAML values.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

# Global configuration cache
_config_cache: dict[str, Any] | None = None


def load_config(config_path: str = "config/app.yaml") -> dict[str, Any]:
    """Load configuration from YAML file with environment variable support."""
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    # Load environment variables
    load_dotenv()

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file) as f:
        config = yaml.safe_load(f) or {}

    _config_cache = config
    return config


def cfg(key: str, default: Any = None) -> Any:
    """
    Get configuration value using dot notation.

    Args:
        key: Dot-separated key path (e.g., "channelape.endpoint")
        default: Default value if key is not found

    Returns:
        Configuration value or default

    Examples:
        cfg("global.log_level", "INFO")
        cfg("channelape.max_pages")
    """
    config = load_config()

    if "." not in key:
        return config.get(key, default)

    value = config
    try:
        for k in key.split("."):
            value = value[k]
        return value
    except (KeyError, TypeError):
        return default


def env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def _int_or_none(value: Any) -> int | None:
    if value in (None, ""):
        return None
    return int(value)


def get_channelape_config() -> dict[str, Any]:
    """
    Get ChannelApe client settings, environment first, then YAML.

    Returns:
        Keyword arguments for ChannelApeConfig; unset values are omitted
    """
    settings = {
        "session_id": env("CHANNELAPE_SESSION_ID", cfg("channelape.session_id")),
        "email": env("CHANNELAPE_EMAIL", cfg("channelape.email")),
        "password": env("CHANNELAPE_PASSWORD", cfg("channelape.password")),
        "endpoint": env("CHANNELAPE_ENDPOINT", cfg("channelape.endpoint")),
        "timeout": _int_or_none(env("CHANNELAPE_TIMEOUT", cfg("channelape.timeout"))),
        "maximum_request_retry_timeout": _int_or_none(
            env("CHANNELAPE_MAX_RETRY_TIMEOUT", cfg("channelape.maximum_request_retry_timeout"))
        ),
        "log_level": env("CHANNELAPE_LOG_LEVEL", cfg("channelape.log_level")),
        "max_pages": _int_or_none(cfg("channelape.max_pages")),
    }
    return {key: value for key, value in settings.items() if value is not None}


def reload_config() -> None:
    """Force reload of configuration cache."""
    global _config_cache
    _config_cache = None
