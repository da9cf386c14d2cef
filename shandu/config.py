"""Configuration file management for shandu."""

import logging
import math
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

DEFAULT_TRUSTED_STORES = [
    "Checkers",
    "Pick n Pay",
    "Woolworths",
    "Spar",
    "Shoprite",
    "Makro",
    "Clicks",
    "Dis-Chem",
    "Takealot",
    "Food Lover's Market",
    "Game",
    "Boxer",
]


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdvisorSettings:
    """Settings for the advice/search service."""

    model: str = "gemini-2.5-flash"
    endpoint: str = "https://generativelanguage.googleapis.com/v1beta"
    api_key_env: str = "GEMINI_API_KEY"
    location: str = "Durban, South Africa"
    currency: str = "R"
    timeout: float = 30.0
    trusted_stores: list[str] = field(default_factory=lambda: list(DEFAULT_TRUSTED_STORES))

    def api_key(self) -> str | None:
        """Read the API key from the configured environment variable."""
        return os.environ.get(self.api_key_env) or None


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "shandu" / "config.toml"


def default_config() -> dict[str, Any]:
    """Default configuration dictionary."""
    settings = AdvisorSettings()
    return {
        "advisor": {
            "model": settings.model,
            "endpoint": settings.endpoint,
            "api_key_env": settings.api_key_env,
            "location": settings.location,
            "currency": settings.currency,
            "timeout": settings.timeout,
            "trusted_stores": settings.trusted_stores,
        }
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config(), f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def get_advisor_settings(config_path: Path | None = None) -> AdvisorSettings:
    """Advisor settings from the config file, with defaults for anything missing.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        AdvisorSettings.
    """
    try:
        config = load_config(config_path)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return AdvisorSettings()

    section = config.get("advisor", {})
    if not isinstance(section, dict):
        return AdvisorSettings()

    defaults = AdvisorSettings()
    return AdvisorSettings(
        model=_text_setting(section, "model", defaults.model),
        endpoint=_text_setting(section, "endpoint", defaults.endpoint).rstrip("/"),
        api_key_env=_text_setting(section, "api_key_env", defaults.api_key_env),
        location=_text_setting(section, "location", defaults.location),
        currency=_text_setting(section, "currency", defaults.currency),
        timeout=_timeout_setting(section, defaults.timeout),
        trusted_stores=_stores_setting(section, defaults.trusted_stores),
    )


def _text_setting(section: dict[str, Any], key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str):
        logger.warning("Ignoring invalid advisor.%s %r, using %r", key, value, default)
        return default
    return value


def _timeout_setting(section: dict[str, Any], default: float) -> float:
    value = section.get("timeout", default)
    try:
        if isinstance(value, bool):
            raise TypeError(value)
        timeout = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid advisor.timeout %r, using %s", value, default)
        return default
    if not math.isfinite(timeout) or timeout <= 0:
        logger.warning("Ignoring invalid advisor.timeout %r, using %s", value, default)
        return default
    return timeout


def _stores_setting(section: dict[str, Any], default: list[str]) -> list[str]:
    value = section.get("trusted_stores", default)
    if not isinstance(value, list):
        logger.warning("Ignoring invalid advisor.trusted_stores %r", value)
        return default
    return [str(s) for s in value]
