"""Persistent list of WFM servers, one ``name///url`` line per server."""

from __future__ import annotations

import logging
from pathlib import Path

from wfmclient.models import ServerEntry
from wfmclient.url_parser import normalize_base_url

logger = logging.getLogger(__name__)

ENTRY_SEPARATOR = "///"


class ServerStoreError(Exception):
    """Raised when the server list cannot be changed as requested."""


def parse_line(line: str) -> ServerEntry:
    name, sep, url = line.strip().partition(ENTRY_SEPARATOR)
    if not sep or not name or not url:
        raise ServerStoreError(f"Malformed server line: {line!r}")
    return ServerEntry(name=name, url=url)


def format_entry(entry: ServerEntry) -> str:
    return f"{entry.name}{ENTRY_SEPARATOR}{entry.url}"


class ServerStore:
    """Server list file kept sorted by its full lines after every change."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> list[ServerEntry]:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch()
            return []

        entries: list[ServerEntry] = []
        for line in self.path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            try:
                entries.append(parse_line(line))
            except ServerStoreError:
                logger.warning("Skipping malformed line in %s: %r", self.path, line)
        return entries

    def save(self, entries: list[ServerEntry]) -> None:
        lines = sorted(format_entry(e) for e in entries)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")

    def sort(self) -> list[ServerEntry]:
        """Rewrite the file in sorted order and return the sorted entries."""
        entries = self.load()
        self.save(entries)
        return self.load()

    def get(self, name: str) -> ServerEntry | None:
        return next((e for e in self.load() if e.name == name), None)

    def add(self, name: str, url: str) -> ServerEntry:
        entries = self.load()
        entry = self._validated(name, url, entries)
        entries.append(entry)
        self.save(entries)
        logger.info("Added server %s (%s)", entry.name, entry.url)
        return entry

    def update(self, old_name: str, name: str, url: str) -> ServerEntry:
        entries = self.load()
        if not any(e.name == old_name for e in entries):
            raise ServerStoreError(f"No server named {old_name!r}.")
        others = [e for e in entries if e.name != old_name]
        entry = self._validated(name, url, others)
        self.save(others + [entry])
        logger.info("Updated server %s -> %s (%s)", old_name, entry.name, entry.url)
        return entry

    def remove(self, name: str) -> None:
        entries = self.load()
        remaining = [e for e in entries if e.name != name]
        if len(remaining) == len(entries):
            raise ServerStoreError(f"No server named {name!r}.")
        self.save(remaining)
        logger.info("Removed server %s", name)

    @staticmethod
    def _validated(name: str, url: str, existing: list[ServerEntry]) -> ServerEntry:
        name = name.strip()
        if not name:
            raise ServerStoreError("Server name is empty.")
        if ENTRY_SEPARATOR in name:
            raise ServerStoreError(f"Server name must not contain {ENTRY_SEPARATOR!r}.")
        # "docs/" would be written as "docs////url" and read back as "docs"
        if name.endswith("/"):
            raise ServerStoreError("Server name must not end with '/'.")
        if "\n" in name or "\r" in name:
            raise ServerStoreError("Server name must be a single line.")
        if any(e.name == name for e in existing):
            raise ServerStoreError(f"A server named {name!r} already exists.")

        entry = ServerEntry(name=name, url=normalize_base_url(url))
        if parse_line(format_entry(entry)) != entry:
            raise ServerStoreError(f"Server {name!r} cannot be stored as a single line.")
        return entry
