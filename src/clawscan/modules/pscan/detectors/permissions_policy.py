"""Permissions-Policy header detector."""

import logging
import time
from collections.abc import Iterator
from types import MappingProxyType

from .. import classifier
from ..base import PassiveDetector
from ..models import Alert, AlertThreshold, Confidence, HttpMessage, Risk
from ..tags import CommonAlertTag, PolicyTag

logger = logging.getLogger(__name__)

PERMISSIONS_POLICY_HEADER = "Permissions-Policy"
DEPRECATED_HEADER = "Feature-Policy"


class PermissionsPolicyDetector(PassiveDetector):
    """Report HTML/JS responses lacking Permissions-Policy or still sending Feature-Policy."""

    plugin_id = 10063
    message_prefix = "pscan.permissionspolicy."
    risk = Risk.LOW
    confidence = Confidence.MEDIUM
    wasc_id = 15  # Application Misconfiguration
    alert_tags = MappingProxyType(
        {
            **CommonAlertTag.to_map(
                CommonAlertTag.OWASP_2021_A01_BROKEN_AC,
                CommonAlertTag.OWASP_2017_A05_BROKEN_AC,
            ),
            PolicyTag.PENTEST.tag: "",
            PolicyTag.QA_STD.tag: "",
        }
    )

    MISSING_ALERT_REF = f"{plugin_id}-1"
    DEPRECATED_ALERT_REF = f"{plugin_id}-2"

    def inspect(self, message: HttpMessage) -> Iterator[Alert]:
        started = time.perf_counter()
        if not classifier.is_html(message) and not classifier.is_javascript(message):
            return
        if (
            classifier.is_redirect(message.status_code)
            and self.threshold is not AlertThreshold.LOW
        ):
            return

        if message.response_header_values(DEPRECATED_HEADER):
            yield self._build_deprecated_alert(uri=message.url)
        elif not message.response_header_values(PERMISSIONS_POLICY_HEADER):
            yield self._build_missing_alert(uri=message.url)

        logger.debug(
            "Permissions policy check of %s took %.1f ms",
            message.url,
            (time.perf_counter() - started) * 1000,
        )

    def _build_missing_alert(self, uri: str = "") -> Alert:
        return self.build_alert(
            cwe_id=693,  # Protection Mechanism Failure
            alert_ref=self.MISSING_ALERT_REF,
            uri=uri,
        )

    def _build_deprecated_alert(self, uri: str = "") -> Alert:
        return self.build_alert(
            name=self.message("deprecated.name"),
            description=self.message("deprecated.desc"),
            solution=self.message("deprecated.soln"),
            reference=self.message("deprecated.refs"),
            evidence=DEPRECATED_HEADER,
            cwe_id=16,  # Configuration
            alert_ref=self.DEPRECATED_ALERT_REF,
            uri=uri,
        )

    def example_alerts(self) -> list[Alert]:
        return [self._build_missing_alert(), self._build_deprecated_alert()]
