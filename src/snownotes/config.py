"""
Configuration management for snownotes.

Uses XDG base directories:
- Config: ~/.config/snownotes/config.toml
- Data: ~/.snownotes/ (the note database)
"""

from pathlib import Path
from typing import Any
import copy
import os

# XDG defaults
DEFAULT_CONFIG_HOME = Path.home() / ".config"
DEFAULT_DATA_HOME = Path.home() / ".snownotes"

# Placeholder content for freshly added notes
DEFAULT_TITLE = "New Note"
DEFAULT_BODY = "Hello world!"

DB_FILENAME = "snownotes.db"

BACKENDS = ("sqlite", "memory")


class ConfigError(ValueError):
    """Config file could not be parsed or holds an invalid value."""


def get_config_dir() -> Path:
    """Get the config directory (XDG_CONFIG_HOME/snownotes)."""
    base = Path(os.environ.get("XDG_CONFIG_HOME", DEFAULT_CONFIG_HOME))
    return base / "snownotes"


def get_snownotes_home() -> Path:
    """Get the data directory (~/.snownotes or SNOWNOTES_HOME)."""
    if env_home := os.environ.get("SNOWNOTES_HOME"):
        return Path(env_home)
    return DEFAULT_DATA_HOME


def get_config_path() -> Path:
    """Get the path to config.toml."""
    return get_config_dir() / "config.toml"


def get_db_path() -> Path:
    """Get the path to snownotes.db."""
    return get_snownotes_home() / DB_FILENAME


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config() -> dict[str, Any]:
    """
    Load configuration from config.toml, layered over the defaults.

    Returns default config if file doesn't exist.
    Raises ConfigError if the file is not valid TOML, replaces a section
    with a plain value, or names an unknown storage backend.
    """
    config_path = get_config_path()
    defaults = get_default_config()

    if not config_path.exists():
        config = defaults
    else:
        # Lazy import tomli only when needed
        import tomli

        try:
            with open(config_path, "rb") as f:
                config = _merge(defaults, tomli.load(f))
        except tomli.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e

        for section in defaults:
            if not isinstance(config.get(section), dict):
                raise ConfigError(f"Invalid config file {config_path}: [{section}] must be a table")

    if env_level := os.environ.get("SNOWNOTES_LOG_LEVEL"):
        config["logging"]["level"] = env_level

    backend = config["store"].get("backend")
    if backend not in BACKENDS:
        raise ConfigError(
            f"Unknown store backend: {backend!r} (expected one of {', '.join(BACKENDS)})"
        )

    return config


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "snownotes": {
            "home": str(get_snownotes_home()),
        },
        "store": {
            "backend": "sqlite",  # or "memory" for a throwaway session
        },
        "notes": {
            "default_title": DEFAULT_TITLE,
            "default_body": DEFAULT_BODY,
        },
        "display": {
            "show_created": False,  # Creation date alongside modification date
            "color": True,
        },
        "hints": {
            "enabled": True,
            "reset_on_launch": False,
        },
        "logging": {
            "level": "WARNING",
        },
    }
