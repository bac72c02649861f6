"""Environment variable and configuration file loading."""

import tempfile
from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR_NAME = ".clawscan"
GLOBAL_CONFIG_FILE = "config.yml"


def global_config_dir() -> Path:
    return Path.home() / CONFIG_DIR_NAME


def is_global_config_dir(path: Path) -> bool:
    """Return True if the path is the global ~/.clawscan config directory."""
    home_config = global_config_dir()
    try:
        return path.resolve() == home_config.resolve()
    except FileNotFoundError:
        return path == home_config


def find_project_dir(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` (default: cwd) to the nearest ``.clawscan`` marker.

    The global config dir in the home directory is not a project marker, and
    the walk stops at the system temp root.
    """
    current = (start or Path.cwd()).resolve()
    try:
        temp_root = Path(tempfile.gettempdir()).resolve()
    except OSError:
        temp_root = None
    while current != current.parent:
        if temp_root and current == temp_root:
            return None
        marker = current / CONFIG_DIR_NAME
        if marker.is_dir() and not is_global_config_dir(marker):
            return current
        current = current.parent
    return None


def load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from .env file."""
    env_vars = {}
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    # Remove quotes if present
                    value = value.strip().strip("\"'")
                    env_vars[key.strip()] = value
    return env_vars


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping; an empty file yields an empty dict."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a YAML mapping")
    return data


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ~/.clawscan/config.yml."""
    config_path = global_config_dir() / GLOBAL_CONFIG_FILE
    if config_path.exists():
        return load_yaml_file(config_path)
    return {}


def load_project_config(project_dir: Path | None = None) -> dict[str, str]:
    """Load project-specific configuration from .clawscan/.env."""
    if project_dir is None:
        project_dir = find_project_dir()

    if project_dir:
        return load_env_file(project_dir / CONFIG_DIR_NAME / ".env")

    return {}
