"""
Configuration management for ClawScan.

Supports multiple configuration sources in order of priority:
1. Environment variables (highest priority)
2. Project .env file (.clawscan/.env)
3. Global config file (~/.clawscan/config.yml)
4. Default values (lowest priority)
"""

from .env_loader import (
    find_project_dir,
    global_config_dir,
    is_global_config_dir,
    load_env_file,
    load_global_config,
    load_project_config,
    load_yaml_file,
)
from .getters import (
    POLICY_ENV,
    THRESHOLD_ENV,
    get_alert_threshold,
    get_config,
    get_policy_path,
)
from .policy import ScanPolicy, load_scan_policy

__all__ = [
    # env_loader
    "find_project_dir",
    "global_config_dir",
    "is_global_config_dir",
    "load_env_file",
    "load_global_config",
    "load_project_config",
    "load_yaml_file",
    # getters
    "POLICY_ENV",
    "THRESHOLD_ENV",
    "get_alert_threshold",
    "get_config",
    "get_policy_path",
    # policy
    "ScanPolicy",
    "load_scan_policy",
]
