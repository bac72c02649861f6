"""User controllable JavaScript event detector."""

import logging
import re
from collections.abc import Iterator
from types import MappingProxyType

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from .. import classifier
from ..base import PassiveDetector
from ..models import (
    Alert,
    Confidence,
    HtmlAttribute,
    HttpMessage,
    Parameter,
    ParameterOrigin,
    Risk,
)
from ..tags import CommonAlertTag, PolicyTag

logger = logging.getLogger(__name__)

JAVASCRIPT_EVENTS = frozenset(
    {
        "onabort",
        "onbeforeunload",
        "onblur",
        "onchange",
        "onclick",
        "oncontextmenu",
        "ondblclick",
        "ondrag",
        "ondragend",
        "ondragenter",
        "ondragleave",
        "ondragover",
        "ondragstart",
        "ondrop",
        "onerror",
        "onfocus",
        "onhashchange",
        "onkeydown",
        "onkeypress",
        "onkeyup",
        "onload",
        "onmessage",
        "onmousedown",
        "onmousemove",
        "onmouseout",
        "onmouseover",
        "onmouseup",
        "onmousewheel",
        "onoffline",
        "ononline",
        "onpopstate",
        "onreset",
        "onresize",
        "onscroll",
        "onselect",
        "onstorage",
        "onsubmit",
        "onunload",
    }
)

EVENT_VALUE_DELIMITERS = re.compile(r"[;=,:]")


def event_attributes(body: str) -> list[HtmlAttribute]:
    """Collect every JavaScript event handler attribute in an HTML document."""
    try:
        soup = BeautifulSoup(body, "html.parser")
    except ParserRejectedMarkup:
        logger.debug("Unable to parse response body as HTML")
        return []

    found: list[HtmlAttribute] = []
    for element in soup.find_all(True):
        for name, value in element.attrs.items():
            if name.lower() not in JAVASCRIPT_EVENTS:
                continue
            if isinstance(value, list):
                value = " ".join(value)
            found.append(HtmlAttribute(element.name, name, value or ""))
    return found


def reflects_parameter(attribute: HtmlAttribute, param: Parameter) -> bool:
    """True when a delimiter-separated token of the handler equals the parameter value."""
    expected = param.value.lower()
    return any(
        token.lower() == expected
        for token in EVENT_VALUE_DELIMITERS.split(attribute.attribute_value)
    )


class UserControlledJavascriptEventDetector(PassiveDetector):
    """Flag request parameter values reflected into inline event handlers."""

    plugin_id = 10043
    message_prefix = "pscan.usercontrolledjavascriptevent."
    risk = Risk.INFO
    confidence = Confidence.LOW
    cwe_id = 20  # Improper Input Validation
    wasc_id = 20  # Improper Input Handling
    alert_tags = MappingProxyType(
        {
            **CommonAlertTag.to_map(
                CommonAlertTag.OWASP_2021_A03_INJECTION,
                CommonAlertTag.OWASP_2017_A01_INJECTION,
            ),
            PolicyTag.PENTEST.tag: "",
        }
    )

    def inspect(self, message: HttpMessage) -> Iterator[Alert]:
        if not classifier.is_page_200(message) or not classifier.is_html(message):
            return

        params = [param for param in message.params() if param.value]
        if not params:
            return

        for attribute in event_attributes(message.response_body):
            for param in params:
                if reflects_parameter(attribute, param):
                    yield self._build_alert(message.url, attribute, param)

    def _build_alert(self, url: str, attribute: HtmlAttribute, param: Parameter) -> Alert:
        return self.build_alert(
            param=param.name,
            evidence=attribute.attribute_value,
            other_info=self.message(
                "extrainfo",
                url,
                attribute.attribute_name,
                param.name,
                param.value,
                attribute.attribute_value,
            ),
            uri=url,
        )

    def example_alerts(self) -> list[Alert]:
        return [
            self._build_alert(
                "http://example.com/i.php?place=moon&name=Foo",
                HtmlAttribute("img", "onerror", "foo"),
                Parameter("name", "foo", ParameterOrigin.URL),
            )
        ]
