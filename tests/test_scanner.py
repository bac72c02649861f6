"""Tests for the passive scanner."""

from collections.abc import Iterator

import pytest

from clawscan.modules.pscan import (
    Alert,
    DetectorRegistry,
    HttpMessage,
    PassiveDetector,
    PassiveScanner,
    YamlMessageCatalog,
    create_default_registry,
)

CATALOG = YamlMessageCatalog.from_text(
    """
test:
  quiet:
    name: Quiet Detector
    desc: Always alerts
    soln: Nothing to do
    refs: https://example.com
"""
)


class QuietDetector(PassiveDetector):
    plugin_id = 90001
    message_prefix = "test.quiet."

    def __init__(self):
        super().__init__(CATALOG)

    def inspect(self, message: HttpMessage) -> Iterator[Alert]:
        yield self.build_alert(uri=message.url)

    def example_alerts(self) -> list[Alert]:
        return [self.build_alert()]


class ExplodingDetector(QuietDetector):
    plugin_id = 90002

    def inspect(self, message: HttpMessage) -> Iterator[Alert]:
        yield self.build_alert(evidence="before failure")
        raise RuntimeError("boom")


@pytest.fixture
def vulnerable_page(make_message):
    """A secure HTML page that every built-in detector has something to say about."""
    return make_message(
        url="https://example.com/i.php?name=foo",
        response_headers=[
            ("Content-Type", "text/html"),
            ("Server", "Apache/2.2.22 OpenSSL/1.0.1e"),
            ("X-Generated", "1704114087"),
        ],
        response_body='<html><img src="x" onerror="alert(1);foo"></html>',
    )


# ── scanning ─────────────────────────────────────────────────────


class TestPassiveScanner:
    def test_all_detectors_run(self, vulnerable_page, fixed_clock):
        scanner = PassiveScanner(create_default_registry(clock=fixed_clock))
        alerts = scanner.scan_message(vulnerable_page)
        assert {alert.plugin_id for alert in alerts} == {10015, 10034, 10043, 10063, 10096}

    def test_scan_is_idempotent(self, vulnerable_page, fixed_clock):
        scanner = PassiveScanner(create_default_registry(clock=fixed_clock))
        assert scanner.scan_message(vulnerable_page) == scanner.scan_message(vulnerable_page)

    def test_sink_receives_alerts_in_order(self, vulnerable_page, fixed_clock):
        received: list[Alert] = []
        scanner = PassiveScanner(create_default_registry(clock=fixed_clock), sink=received.append)
        alerts = scanner.scan_message(vulnerable_page)
        assert received == alerts

    def test_restricted_to_plugin_ids(self, vulnerable_page):
        scanner = PassiveScanner(plugin_ids=[10034])
        assert [d.plugin_id for d in scanner.active_detectors] == [10034]
        assert [a.plugin_id for a in scanner.scan_message(vulnerable_page)] == [10034]

    def test_unknown_plugin_id(self):
        with pytest.raises(ValueError):
            PassiveScanner(plugin_ids=[1])

    def test_clean_message(self, make_message):
        message = make_message(url="http://example.com/", response_body="")
        assert PassiveScanner().scan_message(message) == []


class TestFailureIsolation:
    def test_failure_does_not_stop_other_detectors(self, make_message):
        registry = DetectorRegistry([QuietDetector(), ExplodingDetector()])
        scanner = PassiveScanner(registry)
        outcome = scanner.scan_message_with_diagnostics(make_message())

        assert [a.plugin_id for a in outcome.alerts] == [90001, 90002]
        assert len(outcome.errors) == 1
        error = outcome.errors[0]
        assert error.plugin_id == 90002
        assert error.detector == "ExplodingDetector"
        assert error.message == "boom"

    def test_failure_is_logged(self, make_message, caplog):
        scanner = PassiveScanner(DetectorRegistry([ExplodingDetector()]))
        with caplog.at_level("WARNING"):
            scanner.scan_message(make_message())
        assert "Detector 90002" in caplog.text


class TestScanMessages:
    def test_parallel_keeps_order(self, make_message, fixed_clock):
        messages = [
            make_message(
                url=f"https://example.com/{i}",
                response_headers={"Content-Type": "text/html"},
                response_body=f"<p>{1704114087 + i}</p>",
            )
            for i in range(8)
        ]
        scanner = PassiveScanner(create_default_registry(clock=fixed_clock), plugin_ids=[10096])
        sequential = scanner.scan_messages(messages)
        parallel = scanner.scan_messages(messages, workers=4)

        assert [o.url for o in parallel] == [m.url for m in messages]
        assert [o.alerts for o in parallel] == [o.alerts for o in sequential]
        assert parallel[3].alerts[0].evidence == str(1704114087 + 3)
