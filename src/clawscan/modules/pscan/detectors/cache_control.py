"""Cache-Control directive detector."""

from collections.abc import Iterator
from types import MappingProxyType

from .. import classifier
from ..base import PassiveDetector
from ..models import Alert, AlertThreshold, Confidence, HttpMessage, Risk
from ..tags import CommonAlertTag, PolicyTag

CACHE_CONTROL_HEADER = "Cache-Control"
REQUIRED_DIRECTIVES = ("no-store", "no-cache", "must-revalidate")


class CacheControlDetector(PassiveDetector):
    """Flag secure responses that browsers and proxies are allowed to cache."""

    plugin_id = 10015
    message_prefix = "pscan.cachecontrol."
    risk = Risk.INFO
    confidence = Confidence.LOW
    cwe_id = 525  # Use of Web Browser Cache Containing Sensitive Information
    wasc_id = 13
    alert_tags = MappingProxyType(
        {
            **CommonAlertTag.to_map(CommonAlertTag.WSTG_V42_ATHN_06_CACHE_WEAKNESS),
            PolicyTag.PENTEST.tag: "",
        }
    )

    def inspect(self, message: HttpMessage) -> Iterator[Alert]:
        if not self._applies(message):
            return

        cache_control = ", ".join(message.response_header_values(CACHE_CONTROL_HEADER)).lower()
        # Any single missing directive is enough.
        if not cache_control or any(
            directive not in cache_control for directive in REQUIRED_DIRECTIVES
        ):
            yield self._build_alert(cache_control, uri=message.url)

    def _applies(self, message: HttpMessage) -> bool:
        if not message.is_secure or not message.response.content:
            return False
        if message.method == "POST" or classifier.is_image(message):
            return False
        if self.threshold is AlertThreshold.LOW:
            return True
        # HTML, XML, JSON and plain text only; JS and CSS are usually meant to be cached.
        status = message.status_code
        return not (
            classifier.is_redirect(status)
            or classifier.is_client_error(status)
            or classifier.is_server_error(status)
            or not classifier.is_text(message)
            or classifier.is_javascript(message)
            or classifier.is_css(message)
        )

    def _build_alert(self, evidence: str, uri: str = "") -> Alert:
        return self.build_alert(param=CACHE_CONTROL_HEADER, evidence=evidence, uri=uri)

    def example_alerts(self) -> list[Alert]:
        return [self._build_alert("no-store, must-revalidate")]
