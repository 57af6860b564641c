"""Tests for server_store module."""

import pytest

from wfmclient.models import ServerEntry
from wfmclient.server_store import (
    ServerStore,
    ServerStoreError,
    format_entry,
    parse_line,
)
from wfmclient.url_parser import ServerURLError


@pytest.fixture
def store(tmp_path):
    return ServerStore(tmp_path / "servers")


class TestParseLine:
    def test_name_and_url(self):
        assert parse_line("Home///http://wfm.test/") == ServerEntry("Home", "http://wfm.test/")

    def test_url_keeps_later_separators(self):
        entry = parse_line("Odd///http://wfm.test///x")
        assert entry.url == "http://wfm.test///x"

    def test_strips_line_ending(self):
        assert parse_line("Home///http://wfm.test/\n").url == "http://wfm.test/"

    @pytest.mark.parametrize("line", ["no separator", "///http://x/", "Name///"])
    def test_malformed(self, line):
        with pytest.raises(ServerStoreError):
            parse_line(line)

    def test_format_is_inverse(self):
        entry = ServerEntry("Home", "http://wfm.test/")
        assert parse_line(format_entry(entry)) == entry


class TestLoad:
    def test_creates_missing_file(self, tmp_path):
        store = ServerStore(tmp_path / "config" / "servers")
        assert store.load() == []
        assert store.path.exists()

    def test_skips_blank_and_malformed_lines(self, store):
        store.path.write_text("A///http://a.test/\n\ngarbage\nB///http://b.test/\n", encoding="utf-8")
        assert [e.name for e in store.load()] == ["A", "B"]


class TestSort:
    def test_rewrites_sorted(self, store):
        store.path.write_text("b///http://b.test/\nA///http://a.test/\na///http://x.test/\n", encoding="utf-8")
        entries = store.sort()
        assert [e.name for e in entries] == ["A", "a", "b"]
        assert store.path.read_text(encoding="utf-8") == (
            "A///http://a.test/\na///http://x.test/\nb///http://b.test/\n"
        )


class TestAdd:
    def test_adds_sorted(self, store):
        store.add("Work", "https://work.test/wfm/")
        store.add("Home", " http://home.test/ ")
        assert store.path.read_text(encoding="utf-8").splitlines() == [
            "Home///http://home.test/",
            "Work///https://work.test/wfm/",
        ]

    def test_duplicate_name(self, store):
        store.add("Home", "http://home.test/")
        with pytest.raises(ServerStoreError, match="already exists"):
            store.add("Home", "http://other.test/")

    def test_separator_in_name(self, store):
        with pytest.raises(ServerStoreError, match="must not contain"):
            store.add("a///b", "http://home.test/")

    def test_empty_name(self, store):
        with pytest.raises(ServerStoreError, match="empty"):
            store.add("  ", "http://home.test/")

    def test_trailing_slash_in_name(self, store):
        with pytest.raises(ServerStoreError, match="end with"):
            store.add("docs/", "http://wfm.test/")
        assert store.load() == []

    def test_multiline_name(self, store):
        with pytest.raises(ServerStoreError, match="single line"):
            store.add("a\nb", "http://wfm.test/")

    @pytest.mark.parametrize("name", ["docs", "my/docs", "a//b", "Zálohy"])
    def test_saved_entry_loads_back(self, store, name):
        entry = store.add(name, "http://wfm.test/")
        assert store.load() == [entry]
        assert entry.name == name

    def test_invalid_url(self, store):
        with pytest.raises(ServerURLError):
            store.add("Home", "ftp://home.test/")
        assert store.load() == []


class TestUpdate:
    def test_rename_and_change_url(self, store):
        store.add("Home", "http://home.test/")
        store.add("Work", "http://work.test/")
        store.update("Home", "Cottage", "http://cottage.test/")
        assert [format_entry(e) for e in store.load()] == [
            "Cottage///http://cottage.test/",
            "Work///http://work.test/",
        ]

    def test_keep_name(self, store):
        store.add("Home", "http://home.test/")
        store.update("Home", "Home", "http://new.test/")
        assert store.get("Home").url == "http://new.test/"

    def test_rename_onto_existing(self, store):
        store.add("Home", "http://home.test/")
        store.add("Work", "http://work.test/")
        with pytest.raises(ServerStoreError, match="already exists"):
            store.update("Home", "Work", "http://home.test/")

    def test_unknown(self, store):
        with pytest.raises(ServerStoreError, match="No server"):
            store.update("Nope", "Home", "http://home.test/")


class TestRemove:
    def test_removes(self, store):
        store.add("Home", "http://home.test/")
        store.add("Work", "http://work.test/")
        store.remove("Home")
        assert store.get("Home") is None
        assert [e.name for e in store.load()] == ["Work"]

    def test_unknown(self, store):
        with pytest.raises(ServerStoreError, match="No server"):
            store.remove("Nope")
