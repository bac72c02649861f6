"""Configuration getter functions."""

import os
from pathlib import Path
from typing import Any

from clawscan.modules.pscan.models import AlertThreshold

from .env_loader import load_global_config, load_project_config

THRESHOLD_ENV = "CLAWSCAN_ALERT_THRESHOLD"
POLICY_ENV = "CLAWSCAN_CONFIG"


def get_config(key: str, project_dir: Path | None = None, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. Project .env file
    3. Global config file
    4. Default value

    Args:
        key: Configuration key
        project_dir: Optional project directory
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    project_config = load_project_config(project_dir)
    if key in project_config:
        return project_config[key]

    global_config = load_global_config()
    if key in global_config:
        return global_config[key]

    return default


def get_alert_threshold(
    project_dir: Path | None = None,
    default: AlertThreshold | None = AlertThreshold.MEDIUM,
) -> AlertThreshold | None:
    """Get the configured alert threshold, or ``default`` when none is set."""
    value = get_config(THRESHOLD_ENV, project_dir)
    if not value:
        return default
    return AlertThreshold.parse(value)


def get_policy_path(project_dir: Path | None = None) -> Path | None:
    """Get the scan policy file path, if one is configured."""
    value = get_config(POLICY_ENV, project_dir)
    return Path(value).expanduser() if value else None
