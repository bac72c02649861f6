"""Static detector table with startup validation."""

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from .base import PassiveDetector
from .detectors import (
    CacheControlDetector,
    HeartBleedDetector,
    PermissionsPolicyDetector,
    TimestampDisclosureDetector,
    UserControlledJavascriptEventDetector,
)
from .messages import MessageCatalog
from .models import Alert, AlertThreshold

if TYPE_CHECKING:
    from clawscan.config import ScanPolicy

logger = logging.getLogger(__name__)


class DetectorRegistry:
    """Hold the registered detectors, keyed by their stable plugin id."""

    def __init__(self, detectors: Iterable[PassiveDetector] | None = None):
        self._detectors: dict[int, PassiveDetector] = {}
        self._disabled: set[int] = set()
        for detector in detectors or []:
            self.register(detector)

    def register(self, detector: PassiveDetector) -> None:
        """Validate and register a detector. Contract violations raise here, not mid-scan."""
        validate_detector(detector)
        if detector.plugin_id in self._detectors:
            existing = self._detectors[detector.plugin_id]
            raise ValueError(
                f"Duplicate plugin id {detector.plugin_id}: "
                f"{type(detector).__name__} clashes with {type(existing).__name__}"
            )
        self._detectors[detector.plugin_id] = detector
        logger.debug("Registered detector %d (%s)", detector.plugin_id, detector.name)

    def get(self, plugin_id: int) -> PassiveDetector | None:
        return self._detectors.get(plugin_id)

    def available_ids(self) -> list[int]:
        return sorted(self._detectors)

    def detectors(self, plugin_ids: Sequence[int] | None = None) -> list[PassiveDetector]:
        """Enabled detectors in plugin id order, optionally restricted to ``plugin_ids``."""
        if not plugin_ids:
            return [
                self._detectors[plugin_id]
                for plugin_id in self.available_ids()
                if plugin_id not in self._disabled
            ]

        missing = sorted(set(plugin_ids) - self._detectors.keys())
        if missing:
            available = ", ".join(str(plugin_id) for plugin_id in self.available_ids()) or "none"
            raise ValueError(
                f"Unknown detector id(s): {', '.join(map(str, missing))}. Available: {available}"
            )
        return [self._detectors[plugin_id] for plugin_id in sorted(set(plugin_ids))]

    def set_threshold(
        self, threshold: AlertThreshold, plugin_ids: Sequence[int] | None = None
    ) -> None:
        for detector in self.detectors(plugin_ids):
            detector.threshold = threshold

    def configure(self, policy: "ScanPolicy") -> None:
        """Inject thresholds and enablement from a scan policy before a run."""
        for plugin_id, detector in self._detectors.items():
            detector.threshold = policy.threshold_for(plugin_id)
        self._disabled = {
            plugin_id for plugin_id in self._detectors if not policy.is_enabled(plugin_id)
        }

    def example_alerts(self) -> list[Alert]:
        alerts: list[Alert] = []
        for detector in self.detectors():
            alerts.extend(detector.example_alerts())
        return alerts

    def __len__(self) -> int:
        return len(self._detectors)

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._detectors


def validate_detector(detector: PassiveDetector) -> None:
    """Check static metadata and example alerts of a detector."""
    detector_type = type(detector).__name__
    if not isinstance(detector.plugin_id, int) or detector.plugin_id <= 0:
        raise ValueError(f"{detector_type} must declare a positive integer plugin_id")
    if not detector.message_prefix:
        raise ValueError(f"{detector_type} must declare a message_prefix")

    # Missing catalog entries surface as KeyError while building examples.
    if not detector.name:
        raise ValueError(f"{detector_type} has an empty name")
    examples = detector.example_alerts()
    if not examples:
        raise ValueError(f"{detector_type} must provide at least one example alert")

    refs: set[str] = set()
    for alert in examples:
        if alert.plugin_id != detector.plugin_id:
            raise ValueError(
                f"{detector_type} example alert has plugin id {alert.plugin_id}, "
                f"expected {detector.plugin_id}"
            )
        for field_name in ("name", "description", "solution"):
            if not getattr(alert, field_name):
                raise ValueError(f"{detector_type} example alert is missing {field_name}")
        ref = alert.alert_ref or str(alert.plugin_id)
        if ref in refs:
            raise ValueError(f"{detector_type} has duplicate example alert ref {ref}")
        refs.add(ref)


def create_default_registry(
    messages: MessageCatalog | None = None,
    clock: Callable[[], datetime] | None = None,
) -> DetectorRegistry:
    """Return a registry holding every built-in detector."""
    return DetectorRegistry(
        [
            CacheControlDetector(messages),
            HeartBleedDetector(messages),
            UserControlledJavascriptEventDetector(messages),
            PermissionsPolicyDetector(messages),
            TimestampDisclosureDetector(messages, clock=clock),
        ]
    )
