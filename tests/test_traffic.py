"""Tests for the traffic module."""

import base64
import json
from pathlib import Path

import pytest

from clawscan.cli_commands.scan_command import entries_to_messages
from clawscan.modules.pscan.detectors import TimestampDisclosureDetector
from clawscan.traffic import (
    ProxyEntry,
    ProxyStore,
    har_entry_to_proxy_entry,
    load_har,
    load_traffic,
)

# ── ProxyEntry ───────────────────────────────────────────────────


class TestProxyEntry:
    def test_defaults(self):
        entry = ProxyEntry()
        assert entry.id == 0
        assert entry.method == "GET"
        assert entry.url == ""
        assert entry.status_code == 0
        assert entry.request_headers == []
        assert entry.response_body == b""

    def test_header_mapping_normalised(self):
        entry = ProxyEntry(response_headers={"Server": "nginx"})
        assert entry.response_headers == [("Server", "nginx")]

    def test_text_body_encoded(self):
        assert ProxyEntry(response_body="hello").response_body == b"hello"

    def test_mutable_defaults_are_independent(self):
        a = ProxyEntry()
        b = ProxyEntry()
        a.response_headers.append(("X-Only", "a"))
        assert b.response_headers == []

    def test_to_message(self):
        entry = ProxyEntry(
            method="POST",
            url="https://example.com/login",
            request_headers=[("Content-Type", "application/x-www-form-urlencoded")],
            request_body="user=alice",
            status_code=200,
            response_headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")],
            response_body=b"welcome",
        )
        message = entry.to_message()
        assert message.method == "POST"
        assert message.response_body == "welcome"
        assert message.response_header_values("set-cookie") == ["a=1", "b=2"]
        assert [p.name for p in message.form_params()] == ["user"]

    def test_non_ascii_header_keeps_message_scannable(self, fixed_clock):
        store = ProxyStore()
        store.add(
            ProxyEntry(
                url="https://example.com/",
                status_code=200,
                response_headers=[
                    ("Content-Disposition", 'attachment; filename="résumé.html"'),
                    ("X-Generated", "1704114087"),
                ],
                response_body=b"ok",
            )
        )
        messages = entries_to_messages(store)
        assert len(messages) == 1
        alerts = list(TimestampDisclosureDetector(clock=fixed_clock).inspect(messages[0]))
        assert [(a.param, a.evidence) for a in alerts] == [("X-Generated", "1704114087")]

    def test_binary_body_round_trip(self):
        entry = ProxyEntry(url="https://example.com/logo.png", response_body=bytes(range(256)))
        data = entry.to_dict()
        assert data["response_body_encoding"] == "base64"
        assert ProxyEntry.from_dict(data).response_body == bytes(range(256))

    def test_text_body_stored_as_text(self):
        data = ProxyEntry(response_body="héllo".encode()).to_dict()
        assert data["response_body"] == "héllo"
        assert "response_body_encoding" not in data

    def test_invalid_base64_body_rejected(self):
        with pytest.raises(ValueError, match="base64"):
            ProxyEntry.from_dict({"response_body": "%%%", "response_body_encoding": "base64"})

    def test_dict_round_trip_keeps_repeated_headers(self):
        entry = ProxyEntry(
            url="https://example.com/",
            response_headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")],
            response_body=b"ok",
        )
        restored = ProxyEntry.from_dict(entry.to_dict())
        assert restored.response_headers == entry.response_headers
        assert restored.response_body == b"ok"
        assert restored.timestamp == entry.timestamp


# ── ProxyStore ───────────────────────────────────────────────────


class TestProxyStore:
    def test_add_and_get(self):
        store = ProxyStore()
        entry = store.add(ProxyEntry(url="http://a.com"))
        assert entry.id == 1
        assert store.get(1) is entry
        assert store.get(999) is None

    def test_len_and_entries_copy(self):
        store = ProxyStore()
        store.add(ProxyEntry())
        assert len(store) == 1
        store.entries.clear()
        assert len(store) == 1

    def test_eviction(self):
        store = ProxyStore(max_entries=3)
        for i in range(5):
            store.add(ProxyEntry(url=f"http://{i}.com"))
        assert len(store) == 3
        assert store.get(1) is None
        assert store.get(5) is not None

    def test_search(self):
        store = ProxyStore()
        store.add(ProxyEntry(url="http://example.com/login", method="POST", status_code=302))
        store.add(ProxyEntry(url="http://other.com", status_code=200))
        assert len(store.search(url_pattern="example")) == 1
        assert len(store.search(method="post")) == 1
        assert len(store.search(status_code=200)) == 1

    def test_clear(self):
        store = ProxyStore()
        store.add(ProxyEntry())
        store.add(ProxyEntry())
        assert store.clear() == 2
        assert store.add(ProxyEntry()).id == 1

    def test_save_and_load_binary_body(self, temp_dir: Path):
        store = ProxyStore()
        store.add(ProxyEntry(url="https://example.com/a.bin", response_body=bytes(range(256))))
        path = temp_dir / "traffic.json"
        store.save(path)
        assert ProxyStore.load(path).get(1).response_body == bytes(range(256))

    def test_save_and_load(self, temp_dir: Path):
        store = ProxyStore()
        store.add(ProxyEntry(url="https://example.com/", status_code=200, response_body=b"x"))
        path = temp_dir / "traffic.json"
        store.save(path)

        loaded = ProxyStore.load(path)
        assert len(loaded) == 1
        assert loaded.get(1).url == "https://example.com/"
        assert [m.url for m in loaded.messages()] == ["https://example.com/"]

    def test_load_rejects_non_list(self, temp_dir: Path):
        path = temp_dir / "traffic.json"
        path.write_text('{"entries": []}')
        with pytest.raises(ValueError, match="expected a JSON list"):
            ProxyStore.load(path)


# ── HAR import ───────────────────────────────────────────────────


def _har_entry(**overrides):
    entry = {
        "startedDateTime": "2024-01-01T13:01:27.000Z",
        "time": 250,
        "request": {
            "method": "POST",
            "url": "https://example.com/i.php?name=foo",
            "headers": [{"name": "Accept", "value": "*/*"}],
            "postData": {"mimeType": "application/x-www-form-urlencoded", "text": "a=b"},
        },
        "response": {
            "status": 200,
            "headers": [{"name": "Content-Type", "value": "text/html"}],
            "content": {"mimeType": "text/html", "text": "<p>hi</p>"},
        },
    }
    entry.update(overrides)
    return entry


class TestHar:
    def test_entry_conversion(self):
        entry = har_entry_to_proxy_entry(_har_entry())
        assert entry.method == "POST"
        assert entry.status_code == 200
        assert entry.response_body == b"<p>hi</p>"
        assert entry.response_time == pytest.approx(0.25)
        assert entry.timestamp.year == 2024
        assert ("Content-Type", "application/x-www-form-urlencoded") in entry.request_headers
        assert entry.request_body == "a=b"

    def test_base64_body(self):
        item = _har_entry()
        item["response"]["content"] = {
            "text": base64.b64encode(b"\x89PNG").decode(),
            "encoding": "base64",
        }
        assert har_entry_to_proxy_entry(item).response_body == b"\x89PNG"

    def test_load_har(self, temp_dir: Path):
        path = temp_dir / "capture.har"
        no_url = _har_entry(request={"method": "GET"})
        path.write_text(json.dumps({"log": {"entries": [_har_entry(), no_url]}}))
        store = load_har(path)
        assert len(store) == 1

    def test_missing_entries(self, temp_dir: Path):
        path = temp_dir / "capture.har"
        path.write_text(json.dumps({"log": {}}))
        with pytest.raises(ValueError, match="not a HAR file"):
            load_har(path)

    def test_load_traffic_dispatches_on_suffix(self, temp_dir: Path):
        har_path = temp_dir / "capture.HAR"
        har_path.write_text(json.dumps({"log": {"entries": [_har_entry()]}}))
        assert len(load_traffic(har_path)) == 1

        json_path = temp_dir / "traffic.json"
        ProxyStore().save(json_path)
        assert len(load_traffic(json_path)) == 0
