"""Base contract for passive detectors."""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from .messages import MessageCatalog, default_catalog
from .models import Alert, AlertThreshold, Confidence, HttpMessage, Risk


class PassiveDetector(ABC):
    """A passive scan rule run once per captured message.

    Subclasses declare their static metadata as class attributes and yield
    alerts from ``inspect``. Text comes from the message catalog under
    ``message_prefix``; ``build_alert`` fills everything a variant does not
    override.
    """

    plugin_id: int = 0
    message_prefix: str = ""
    risk: Risk = Risk.INFO
    confidence: Confidence = Confidence.MEDIUM
    cwe_id: int = 0
    wasc_id: int = 0
    alert_tags: Mapping[str, str] = MappingProxyType({})

    def __init__(self, messages: MessageCatalog | None = None):
        self.messages = messages if messages is not None else default_catalog()
        self.threshold = AlertThreshold.MEDIUM

    @property
    def name(self) -> str:
        return self.message("name")

    def message(self, key: str, *args: Any) -> str:
        return self.messages.get(f"{self.message_prefix}{key}", *args)

    @abstractmethod
    def inspect(self, message: HttpMessage) -> Iterator[Alert]:
        """Yield an alert for every finding in one message, as found."""

    @abstractmethod
    def example_alerts(self) -> list[Alert]:
        """One alert per variant this detector can raise, from fixed inputs."""

    def build_alert(self, **fields: Any) -> Alert:
        """Assemble an alert from static metadata plus per-finding fields."""
        values: dict[str, Any] = {
            "plugin_id": self.plugin_id,
            "name": self.name,
            "risk": self.risk,
            "confidence": self.confidence,
            "description": self.message("desc"),
            "solution": self.message("soln"),
            "reference": self.message("refs"),
            "cwe_id": self.cwe_id,
            "wasc_id": self.wasc_id,
            "tags": dict(self.alert_tags),
        }
        values.update(fields)
        return Alert(**values)

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(plugin_id={self.plugin_id}, threshold={self.threshold.value})"
