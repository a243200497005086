"""Configuration management for gmailfilter.

Settings live in a YAML file (~/.config/gmailfilter/config.yaml by default)
and are layered over DEFAULT_CONFIG, so a file only needs the keys it changes:

    gmail:
      user_id: me
      scopes: [settings, labels]
"""

import copy
import os
import yaml
import logging
from pathlib import Path
from typing import Any, List

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "gmail": {
        "user_id": "me",
        "scopes": [
            "https://www.googleapis.com/auth/gmail.settings.basic",
            "https://www.googleapis.com/auth/gmail.labels",
        ],
    }
}


def get_config_file_path() -> Path:
    """
    Resolve the config file location.

    GMAILFILTER_CONFIG_FILE names the file directly; otherwise it is
    config.yaml inside GMAILFILTER_CONFIG_DIR or ~/.config/gmailfilter.
    """
    env_file = os.getenv("GMAILFILTER_CONFIG_FILE")
    if env_file:
        return Path(env_file)
    env_dir = os.getenv("GMAILFILTER_CONFIG_DIR")
    config_dir = Path(env_dir) if env_dir else Path.home() / ".config" / "gmailfilter"
    return config_dir / "config.yaml"


def load_config() -> dict:
    """Return DEFAULT_CONFIG overlaid with the config file, if there is a usable one."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_file = get_config_file_path()
    if not config_file.exists():
        logger.debug(f"No config file at {config_file}; using defaults.")
        return config

    try:
        loaded = yaml.safe_load(config_file.read_text())
    except yaml.YAMLError as e:
        logger.error(f"Error loading config file {config_file}: {e}")
        return config

    if loaded is None:
        return config
    if not isinstance(loaded, dict):
        logger.error(f"Ignoring config file {config_file}: expected a mapping, got {type(loaded).__name__}")
        return config
    return _overlay(config, loaded)


def save_config(config_data: dict):
    """Write config_data to the config file, creating its directory if needed."""
    config_file = get_config_file_path()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(yaml.safe_dump(config_data, default_flow_style=False))
    logger.debug(f"Configuration saved to {config_file}")


def _split_key(key: str) -> List[str]:
    return key.split('.')


def get_config_value(key: str, default: Any = None) -> Any:
    """Look up a dot-separated key such as 'gmail.user_id'."""
    value = load_config()
    for part in _split_key(key):
        if not isinstance(value, dict) or part not in value:
            return default
        value = value[part]
    return value


def set_config_value(key: str, value: Any):
    """Set a dot-separated key and save the whole configuration."""
    config_data = load_config()
    *parents, leaf = _split_key(key)
    section = config_data
    for part in parents:
        if not isinstance(section.get(part), dict):
            section[part] = {}
        section = section[part]
    section[leaf] = value
    save_config(config_data)


def _overlay(base: dict, overrides: dict) -> dict:
    """Recursively apply overrides onto base; nested mappings merge, everything else replaces."""
    for k, v in overrides.items():
        if isinstance(base.get(k), dict) and isinstance(v, dict):
            _overlay(base[k], v)
        else:
            base[k] = v
    return base
