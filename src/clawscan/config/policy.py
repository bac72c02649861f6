"""Scan policy: per-detector alert thresholds and enablement."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from clawscan.modules.pscan.models import AlertThreshold

from .env_loader import load_global_config, load_yaml_file
from .getters import get_alert_threshold, get_policy_path

logger = logging.getLogger(__name__)


@dataclass
class ScanPolicy:
    """Thresholds injected into detectors before a scan run."""

    default_threshold: AlertThreshold = AlertThreshold.MEDIUM
    thresholds: dict[int, AlertThreshold] = field(default_factory=dict)
    disabled: set[int] = field(default_factory=set)

    def threshold_for(self, plugin_id: int) -> AlertThreshold:
        return self.thresholds.get(plugin_id, self.default_threshold)

    def is_enabled(self, plugin_id: int) -> bool:
        return plugin_id not in self.disabled

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanPolicy":
        """Build a policy from a parsed YAML mapping."""
        thresholds_raw = data.get("thresholds") or {}
        if not isinstance(thresholds_raw, dict):
            raise ValueError("'thresholds' must map plugin ids to threshold names")
        disabled_raw = data.get("disabled") or []
        if not isinstance(disabled_raw, list):
            raise ValueError("'disabled' must be a list of plugin ids")

        return cls(
            default_threshold=AlertThreshold.parse(data.get("default_threshold")),
            thresholds={
                _plugin_id(key): AlertThreshold.parse(value)
                for key, value in thresholds_raw.items()
            },
            disabled={_plugin_id(value) for value in disabled_raw},
        )


def _plugin_id(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid plugin id in scan policy: {value!r}") from None


def load_scan_policy(path: Path | None = None, project_dir: Path | None = None) -> ScanPolicy:
    """
    Load the scan policy.

    The policy file is ``path`` if given, else the file named by
    ``CLAWSCAN_CONFIG``, else the ``scan_policy`` section of the global
    config. ``CLAWSCAN_ALERT_THRESHOLD`` overrides the default threshold.
    """
    path = path or get_policy_path(project_dir)
    if path is not None:
        logger.debug("Loading scan policy from %s", path)
        data = load_yaml_file(path)
    else:
        data = load_global_config().get("scan_policy") or {}

    policy = ScanPolicy.from_dict(data)
    override = get_alert_threshold(project_dir, default=None)
    if override is not None:
        policy.default_threshold = override
    return policy
