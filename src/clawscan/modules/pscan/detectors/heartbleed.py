"""HeartBleed OpenSSL banner detector."""

import re
from collections.abc import Iterator
from types import MappingProxyType

from ..base import PassiveDetector
from ..models import Alert, Confidence, HttpMessage, Risk
from ..tags import CommonAlertTag, PolicyTag, put_cve

CVE = "CVE-2014-0160"

# Works for Apache banners; there is no equivalent signature for nginx.
OPENSSL_VERSION_PATTERN = re.compile(r"Server:.*?(OpenSSL/([0-9.]+[a-z-0-9]+))", re.IGNORECASE)

# Enumerated on purpose: vendors back-port fixes, so range checks are unreliable.
VULNERABLE_OPENSSL_VERSIONS = (
    "1.0.1-Beta1",
    "1.0.1-Beta2",
    "1.0.1-Beta3",
    "1.0.1",
    "1.0.1a",
    "1.0.1b",
    "1.0.1c",
    "1.0.1d",
    "1.0.1e",
    "1.0.1f",
    "1.0.2-beta",
)
_VULNERABLE_LOWER = frozenset(version.lower() for version in VULNERABLE_OPENSSL_VERSIONS)


def _alert_tags() -> dict[str, str]:
    tags = CommonAlertTag.to_map(
        CommonAlertTag.OWASP_2021_A06_VULN_COMP,
        CommonAlertTag.OWASP_2017_A09_VULN_COMP,
        CommonAlertTag.WSTG_V42_CRYP_01_TLS,
    )
    tags[PolicyTag.PENTEST.tag] = ""
    put_cve(tags, CVE)
    return tags


def is_vulnerable_version(version: str) -> bool:
    return version.lower() in _VULNERABLE_LOWER


class HeartBleedDetector(PassiveDetector):
    """Flag Server banners advertising an OpenSSL build affected by HeartBleed."""

    plugin_id = 10034
    message_prefix = "pscan.heartbleed."
    risk = Risk.HIGH
    # The banner may hide a back-ported fix.
    confidence = Confidence.LOW
    cwe_id = 119  # Improper Restriction of Operations within the Bounds of a Memory Buffer
    wasc_id = 20
    alert_tags = MappingProxyType(_alert_tags())

    def inspect(self, message: HttpMessage) -> Iterator[Alert]:
        headers = message.response_headers_as_string()
        for match in OPENSSL_VERSION_PATTERN.finditer(headers):
            full_version, version = match.group(1), match.group(2)
            if is_vulnerable_version(version):
                yield self._build_alert(full_version, uri=message.url)
                return

    def _build_alert(self, full_version: str, uri: str = "") -> Alert:
        return self.build_alert(
            evidence=full_version,
            other_info=self.message("extrainfo", full_version),
            uri=uri,
        )

    def example_alerts(self) -> list[Alert]:
        return [self._build_alert("OpenSSL/1.0.1e")]
