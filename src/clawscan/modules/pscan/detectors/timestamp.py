"""Timestamp disclosure detector."""

import logging
import re
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from types import MappingProxyType

from .. import classifier
from ..base import PassiveDetector
from ..messages import MessageCatalog
from ..models import (
    Alert,
    AlertThreshold,
    Confidence,
    EvidenceMatch,
    HeaderField,
    HttpMessage,
    Risk,
)
from ..tags import CommonAlertTag, PolicyTag

logger = logging.getLogger(__name__)

# POSIX 32-bit clock rollover, 2038-01-19.
EPOCH_Y2038 = 2_147_483_647

# Only 10-digit values are worth checking: 8 digits collide with CSS RGBA
# colours and 9 digits stop in 2001. The 2 billion series is capped by the
# rollover above.
TIMESTAMP_PATTERNS = MappingProxyType(
    {re.compile(r"\b(?:1\d|2[0-2])\d{8}\b(?!%)", re.ASCII): "Unix"}
)

RESPONSE_HEADERS_TO_IGNORE = frozenset(
    name.lower()
    for name in (
        "Keep-Alive",
        "Cache-Control",
        "ETag",
        "Age",
        "Strict-Transport-Security",
        "Report-To",
        "NEL",
        "Expect-CT",
        "RateLimit-Reset",
        "X-RateLimit-Reset",
        "X-Rate-Limit-Reset",
    )
)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def shift_years(moment: datetime, years: int) -> datetime:
    """Move ``moment`` by whole calendar years, clamping Feb 29 to Feb 28."""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


def parse_unix_timestamp(evidence: str) -> datetime | None:
    """Parse a seconds-since-epoch string, or ``None`` if it is not a 32-bit timestamp."""
    try:
        seconds = int(evidence)
    except ValueError:
        return None
    if seconds > EPOCH_Y2038:
        return None
    try:
        return datetime.fromtimestamp(seconds, UTC)
    except (OverflowError, OSError, ValueError):
        return None


class TimestampDisclosureDetector(PassiveDetector):
    """Report Unix timestamps found in response headers and bodies."""

    plugin_id = 10096
    message_prefix = "pscan.timestampdisclosure."
    risk = Risk.LOW
    confidence = Confidence.LOW
    cwe_id = 497  # Exposure of Sensitive System Information
    wasc_id = 13  # Information Leakage
    alert_tags = MappingProxyType(
        {
            **CommonAlertTag.to_map(
                CommonAlertTag.OWASP_2021_A01_BROKEN_AC,
                CommonAlertTag.OWASP_2017_A03_DATA_EXPOSED,
            ),
            PolicyTag.PENTEST.tag: "",
        }
    )

    def __init__(
        self,
        messages: MessageCatalog | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        super().__init__(messages)
        self.clock = clock or (lambda: datetime.now(UTC))

    def inspect(self, message: HttpMessage) -> Iterator[Alert]:
        if classifier.is_font(message):
            return
        if self.threshold is AlertThreshold.HIGH and classifier.is_javascript(message):
            return

        logger.debug("Checking message %s for timestamps", message.url)
        haystacks = [
            header
            for header in message.response_header_fields()
            if header.name.lower() not in RESPONSE_HEADERS_TO_IGNORE
        ]
        haystacks.append(HeaderField("", message.response_body))

        now = self.clock()
        for pattern, timestamp_type in TIMESTAMP_PATTERNS.items():
            for haystack in haystacks:
                for match in self._find_evidence(pattern, haystack):
                    timestamp = parse_unix_timestamp(match.text)
                    if timestamp is None:
                        continue
                    if not self.in_window(timestamp, now):
                        continue
                    logger.debug(
                        "Found a match for timestamp type %s: %s", timestamp_type, match.text
                    )
                    # Keep going: every timestamp in the message gets its own alert.
                    yield self._build_alert(timestamp_type, match, timestamp, uri=message.url)

    def in_window(self, timestamp: datetime, now: datetime) -> bool:
        """Apply the threshold-dependent plausibility window."""
        if self.threshold is AlertThreshold.LOW:
            return True

        range_start = shift_years(now, -10)
        range_stop = min(shift_years(now, 10), datetime.fromtimestamp(EPOCH_Y2038, UTC))
        if timestamp < range_start or timestamp > range_stop:
            return False

        if self.threshold is AlertThreshold.HIGH:
            return shift_years(now, -1) < timestamp < shift_years(now, 1)
        return True

    @staticmethod
    def _find_evidence(pattern: re.Pattern[str], haystack: HeaderField) -> Iterator[EvidenceMatch]:
        for found in pattern.finditer(haystack.value):
            if found.group():
                yield EvidenceMatch(found.group(), haystack.name)

    def _build_alert(
        self,
        timestamp_type: str,
        match: EvidenceMatch,
        timestamp: datetime,
        uri: str = "",
    ) -> Alert:
        return self.build_alert(
            name=f"{self.name} - {timestamp_type}",
            description=f"{self.message('desc')} - {timestamp_type}",
            param=match.source_location,
            evidence=match.text,
            other_info=self.message("extrainfo", match.text, timestamp.strftime(DATE_FORMAT)),
            uri=uri,
        )

    def example_alerts(self) -> list[Alert]:
        evidence = "1704114087"
        return [
            self._build_alert(
                "Unix",
                EvidenceMatch(evidence, "registeredAt"),
                parse_unix_timestamp(evidence),
            )
        ]
