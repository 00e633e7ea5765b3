"""
Configuration storage for commit_split.

Model settings live in a JSON file named ``.cmsplit`` in the user's home
directory::

    {"model": {"gpt-4o-mini": {"baseURL": "https://...", "apiKey": "sk-..."}}}

The functions here read, validate and update that file. Nothing is kept
in module state; callers load the configuration and pass the selected
model settings on explicitly. A malformed file raises :class:`ConfigError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILE_NAME = ".cmsplit"


class ConfigError(Exception):
    """Raised when the configuration file is invalid or a model is unknown."""

    pass


def _get_config_path() -> Path:
    """Return the location of the configuration file (``~/.cmsplit``)."""
    return Path.home() / CONFIG_FILE_NAME


def load_config() -> Dict[str, Any]:
    """Load the configuration file and return its content.

    Returns an empty dictionary if the file does not exist yet.

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON, or
            the ``model`` section has the wrong shape.
    """
    config_path = _get_config_path()
    if not config_path.exists():
        logger.debug("Configuration file '%s' does not exist", config_path)
        return {}

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {config_path} must be a JSON object")
    models = data.get("model", {})
    if not isinstance(models, dict):
        raise ConfigError("'model' must be an object mapping model names to settings")
    for name, settings in models.items():
        if not isinstance(settings, dict):
            raise ConfigError(f"Settings for model '{name}' must be an object")

    logger.debug("Loaded configuration from: %s", config_path)
    return data


def save_config(data: Dict[str, Any]) -> None:
    """Write ``data`` to the configuration file."""
    config_path = _get_config_path()
    try:
        config_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to write configuration file: %s", exc)
        raise ConfigError(f"Could not write {config_path}: {exc}") from exc


def delete_config_file() -> bool:
    """Delete the configuration file. Returns False if it did not exist."""
    config_path = _get_config_path()
    if not config_path.exists():
        return False
    config_path.unlink()
    return True


def get_model_list() -> Dict[str, Dict[str, str]]:
    """Return the configured models keyed by name."""
    return load_config().get("model", {})


def add_model(name: str, base_url: str, api_key: str) -> None:
    """Add or replace the settings of model ``name``."""
    data = load_config()
    data.setdefault("model", {})[name] = {"baseURL": base_url, "apiKey": api_key}
    save_config(data)


def delete_model(name: str) -> bool:
    """Remove model ``name``. Returns False if it was not configured."""
    data = load_config()
    models = data.get("model", {})
    if name not in models:
        logger.warning('Model configuration for "%s" not found.', name)
        return False
    del models[name]
    save_config(data)
    return True


def get_model(name: str) -> Dict[str, str]:
    """Return the settings of model ``name``.

    Raises:
        ConfigError: If the model is not configured or lacks a base URL
            or API key.
    """
    settings = get_model_list().get(name)
    if settings is None:
        raise ConfigError(f'Model configuration for "{name}" not found.')
    if not settings.get("baseURL") or not settings.get("apiKey"):
        raise ConfigError("Selected model configuration is incomplete.")
    return settings


def mask_api_key(key: str) -> str:
    """Hide all but the first four characters of ``key``."""
    if not key:
        return "No API Key"
    visible = 4
    if len(key) <= visible:
        return "*" * len(key)
    return key[:visible] + "*" * (len(key) - visible)
