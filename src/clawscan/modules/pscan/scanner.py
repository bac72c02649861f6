"""Run registered detectors over captured messages."""

import logging
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from .base import PassiveDetector
from .models import Alert, HttpMessage
from .registry import DetectorRegistry, create_default_registry

logger = logging.getLogger(__name__)

AlertSink = Callable[[Alert], None]


@dataclass
class DetectorError:
    """A detector failure absorbed while scanning one message."""

    plugin_id: int
    detector: str
    url: str
    message: str


@dataclass
class ScanOutcome:
    """Alerts and absorbed detector failures for one message."""

    url: str
    alerts: list[Alert] = field(default_factory=list)
    errors: list[DetectorError] = field(default_factory=list)


class PassiveScanner:
    """Invoke every enabled detector once per message and raise its alerts."""

    def __init__(
        self,
        registry: DetectorRegistry | None = None,
        sink: AlertSink | None = None,
        plugin_ids: Sequence[int] | None = None,
    ):
        self.registry = registry if registry is not None else create_default_registry()
        self.sink = sink
        # Resolve once so unknown ids fail before any message is scanned.
        self._detectors = self.registry.detectors(plugin_ids)

    @property
    def active_detectors(self) -> list[PassiveDetector]:
        return list(self._detectors)

    def scan_message(self, message: HttpMessage) -> list[Alert]:
        """Scan one message and return its alerts in the order they were raised."""
        return self.scan_message_with_diagnostics(message).alerts

    def scan_message_with_diagnostics(self, message: HttpMessage) -> ScanOutcome:
        """Scan one message, absorbing detector failures so siblings still run."""
        outcome = ScanOutcome(url=message.url)
        for detector in self._detectors:
            started = time.perf_counter()
            try:
                for alert in detector.inspect(message):
                    self._raise(alert)
                    outcome.alerts.append(alert)
            except Exception as exc:
                logger.warning(
                    "Detector %d (%s) failed on %s: %s",
                    detector.plugin_id,
                    type(detector).__name__,
                    message.url,
                    exc,
                    exc_info=True,
                )
                outcome.errors.append(
                    DetectorError(
                        plugin_id=detector.plugin_id,
                        detector=type(detector).__name__,
                        url=message.url,
                        message=str(exc),
                    )
                )
            logger.debug(
                "Detector %d scanned %s in %.1f ms",
                detector.plugin_id,
                message.url,
                (time.perf_counter() - started) * 1000,
            )
        return outcome

    def scan_messages(
        self,
        messages: Iterable[HttpMessage],
        workers: int = 1,
    ) -> list[ScanOutcome]:
        """Scan many messages, optionally in parallel; results keep input order."""
        batch = list(messages)
        if workers <= 1 or len(batch) <= 1:
            return [self.scan_message_with_diagnostics(message) for message in batch]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.scan_message_with_diagnostics, batch))

    def _raise(self, alert: Alert) -> None:
        if self.sink is not None:
            self.sink(alert)
