"""Tests for parsing the DOM query results."""

from __future__ import annotations

from embedscout.extractor.dom import extract_dom, parse_frames, parse_servers
from embedscout.extractor.models import Candidate, ServerLabel, SourceMethod


class TestParseFrames:
    def test_frames_in_document_order(self) -> None:
        raw = [
            {"src": "https://player.test/v/1", "title": "Main", "id": "f1"},
            {"src": "//ok.ru/videoembed/2", "title": "", "id": "f2"},
        ]
        assert parse_frames(raw) == [
            Candidate(SourceMethod.DOM_IFRAME, "https://player.test/v/1", "Main"),
            Candidate(SourceMethod.DOM_IFRAME, "//ok.ru/videoembed/2", "f2"),
        ]

    def test_empty_and_malformed_entries_dropped(self) -> None:
        raw = [{"src": ""}, {"src": None}, "junk", {"title": "no src"}, {"src": "  /e/1 "}]
        assert parse_frames(raw) == [Candidate(SourceMethod.DOM_IFRAME, "/e/1", "")]

    def test_none(self) -> None:
        assert parse_frames(None) == []

    def test_over_long_src_dropped_not_truncated(self) -> None:
        long_src = "https://player.test/v/" + "a" * 9000
        raw = [{"src": long_src}, {"src": "https://player.test/v/1"}]
        assert [f.raw_url for f in parse_frames(raw)] == ["https://player.test/v/1"]

    def test_src_at_length_limit_kept(self) -> None:
        src = "https://p.test/" + "a" * (8192 - len("https://p.test/"))
        (frame,) = parse_frames([{"src": src}])
        assert frame.raw_url == src


class TestParseServers:
    def test_short_provider_text_kept(self) -> None:
        raw = [
            {"kind": "text", "label": "VK", "href": "#vk"},
            {"kind": "text", "label": "mp4upload", "href": ""},
        ]
        assert parse_servers(raw, max_length=30) == [
            ServerLabel("VK", "#vk"),
            ServerLabel("mp4upload", ""),
        ]

    def test_long_or_unrelated_text_dropped(self) -> None:
        raw = [
            {"kind": "text", "label": "Watch on stream " + "x" * 40, "href": ""},
            {"kind": "text", "label": "Next episode", "href": "/ep/2"},
        ]
        assert parse_servers(raw, max_length=30) == []

    def test_data_server_kept_regardless_of_text(self) -> None:
        raw = [{"kind": "data", "label": "Server number one, the long name", "href": ""}]
        assert parse_servers(raw, max_length=10) == [
            ServerLabel("Server number one, the long name", "")
        ]

    def test_over_long_href_dropped(self) -> None:
        raw = [{"kind": "text", "label": "VK", "href": "https://vk.test/" + "x" * 9000}]
        assert parse_servers(raw, max_length=30) == [ServerLabel("VK", "")]

    def test_labels_are_length_bounded(self) -> None:
        raw = [{"kind": "data", "label": "s" * 5000, "href": None}]
        (server,) = parse_servers(raw)
        assert len(server.label) == 200
        assert server.href == ""


class TestExtractDom:
    def test_runs_both_queries(self, make_page) -> None:
        page = make_page(
            frames=[{"src": "https://player.test/v/123", "title": "", "id": ""}],
            servers=[{"kind": "text", "label": "Sibnet", "href": "https://sibnet.test/1"}],
        )
        findings = extract_dom(page)

        assert [f.raw_url for f in findings.frames] == ["https://player.test/v/123"]
        assert findings.servers == [ServerLabel("Sibnet", "https://sibnet.test/1")]
        (call,) = [c for c in page.calls if c[0] == "servers"]
        assert call[1]["maxLength"] == 30
        assert "mp4upload" in call[1]["pattern"]
