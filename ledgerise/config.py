"""Configuration file management for ledgerise."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from ledgerise.domain.models import DEFAULT_CURRENCY
from ledgerise.notifications import API_URL, NotificationSettings

DEFAULT_LOG_LEVEL = "WARNING"


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
    return get_xdg_config_home() / "ledgerise" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config: dict[str, Any] = {
        "user": "",
        "currency": DEFAULT_CURRENCY,
        "log_level": DEFAULT_LOG_LEVEL,
        "notifications": {
            "api_url": API_URL,
            "api_key": "",
            "from_email": "",
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config, f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary, empty if the file doesn't exist yet.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return {}

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

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def get_default_user(config_path: Path | None = None) -> str | None:
    """Email of the user commands act as when none is given."""
    user = load_config(config_path).get("user")
    return user or None


def set_default_user(email: str, config_path: Path | None = None) -> None:
    config = load_config(config_path)
    config["user"] = email
    save_config(config, config_path)


def get_default_currency(config_path: Path | None = None) -> str:
    return load_config(config_path).get("currency") or DEFAULT_CURRENCY


def get_log_level(config_path: Path | None = None) -> str:
    return load_config(config_path).get("log_level") or DEFAULT_LOG_LEVEL


def get_notification_settings(config_path: Path | None = None) -> NotificationSettings:
    """Email API settings, with RESEND_API_KEY and RESEND_FROM_EMAIL taking precedence.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        NotificationSettings; missing values stay None.
    """
    section = load_config(config_path).get("notifications", {})

    api_key = os.environ.get("RESEND_API_KEY") or section.get("api_key") or None
    from_email = os.environ.get("RESEND_FROM_EMAIL") or section.get("from_email") or None
    api_url = section.get("api_url") or API_URL

    return NotificationSettings(api_key=api_key, from_email=from_email, api_url=api_url)
