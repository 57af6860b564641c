"""Talk to WFM servers: verify them, list their files, download files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import requests

from wfmclient.api_decoder import DEFAULT_TIMEOUT, WfmError, fetch_api_content
from wfmclient.models import ConnectionState, ServerEntry, ServerOutcome, TreeNode
from wfmclient.path_set import SEPARATOR
from wfmclient.tree_builder import build_subtree
from wfmclient.url_parser import build_file_url

logger = logging.getLogger(__name__)

IDENTITY_TOKEN = "web-file-manager"
FILE_TOKEN = "file"
ROOT_LABEL = "Connected servers"
CHUNK_SIZE = 64 * 1024


class NotWfmServer(WfmError):
    """Raised when a URL answers the identity check with the wrong token."""


class TransferFailed(WfmError):
    """Raised when a file download does not complete."""


def local_path_for(download_dir: str | Path, server_name: str, path: str) -> Path:
    """Return where *path* from *server_name* is stored under *download_dir*."""
    parts = path.split(SEPARATOR)
    if any(part in ("", ".", "..") for part in parts):
        raise TransferFailed(f"Refusing to store unsafe path: {path!r}")
    return Path(download_dir, server_name, *parts)


class WfmConnector:
    """Client for the query-string API of WFM servers."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = "wfmclient/1.0"

    def _api_get(self, url: str) -> str:
        return fetch_api_content(url, session=self.session, timeout=self.timeout)

    def verify_server(self, base_url: str) -> bool:
        return self._api_get(base_url + "?check-api") == IDENTITY_TOKEN

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> WfmConnector:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def list_paths(self, base_url: str) -> list[str]:
        """Return the server's flat path listing, in server order.

        Spaces inside names are kept; only carriage returns are removed and
        blank lines skipped. The whole payload is trimmed while decoding, so
        leading spaces of the first name and trailing spaces of the last
        one are lost.
        """
        payload = self._api_get(base_url + "?api")
        lines = (line.rstrip("\r") for line in payload.split("\n"))
        return list(dict.fromkeys(line for line in lines if line.strip()))

    def get_files_node(self, base_url: str, title: str) -> TreeNode:
        """Return the file tree of the server at *base_url*, rooted at *title*."""
        self._require_wfm(base_url, title)
        return build_subtree(title, self.list_paths(base_url))

    def is_file(self, base_url: str, path: str) -> bool:
        payload = self._api_get(base_url + "?api-type=" + path.replace(" ", "%20"))
        return payload == FILE_TOKEN

    def download_file(self, file_url: str, destination: str | Path) -> Path:
        """Stream *file_url* into *destination*.

        Parent directories and the (empty) destination file are created
        before the transfer starts. On failure the file is left empty.
        """
        destination = Path(destination)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.touch(exist_ok=True)
        except OSError as exc:
            raise TransferFailed(f"Cannot create {destination}: {exc}") from exc

        logger.info("Downloading %s to %s", file_url, destination)
        try:
            with self.session.get(file_url, stream=True, timeout=self.timeout) as resp:
                resp.raise_for_status()
                with destination.open("wb") as fh:
                    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                        fh.write(chunk)
        except (requests.RequestException, OSError) as exc:
            _truncate(destination)
            raise TransferFailed(f"Download of {file_url} failed: {exc}") from exc

        return destination

    def fetch_file(
        self,
        entry: ServerEntry,
        path: str,
        download_dir: str | Path,
    ) -> Path | None:
        """Download *path* from *entry* into *download_dir*.

        Returns the local file, or None if *path* is a directory.
        """
        if not self.is_file(entry.url, path):
            return None
        target = local_path_for(download_dir, entry.name, path)
        return self.download_file(build_file_url(entry.url, path), target)

    def connect(self, entry: ServerEntry) -> ServerOutcome:
        """Verify and list one server, capturing any failure in the outcome."""
        outcome = ServerOutcome(entry=entry)

        _advance(outcome, ConnectionState.VERIFYING)
        try:
            self._require_wfm(entry.url, entry.name)
        except WfmError as exc:
            return _fail(outcome, ConnectionState.VERIFICATION_FAILED, exc)
        _advance(outcome, ConnectionState.VERIFIED)

        _advance(outcome, ConnectionState.LISTING)
        try:
            paths = self.list_paths(entry.url)
        except WfmError as exc:
            return _fail(outcome, ConnectionState.LISTING_FAILED, exc)

        outcome.node = build_subtree(entry.name, paths)
        _advance(outcome, ConnectionState.LISTED)
        return outcome

    def load_servers(
        self, entries: Iterable[ServerEntry]
    ) -> tuple[TreeNode, list[ServerOutcome]]:
        """Connect to every server in order and combine the successful trees.

        Failed servers are left out of the tree; their outcomes carry the error.
        """
        root = TreeNode(label=ROOT_LABEL)
        outcomes: list[ServerOutcome] = []
        for entry in entries:
            outcome = self.connect(entry)
            outcomes.append(outcome)
            if outcome.ok:
                root.add(outcome.node)
        return root, outcomes

    def _require_wfm(self, base_url: str, title: str) -> None:
        if not self.verify_server(base_url):
            raise NotWfmServer(f"{title} isn't a WFM server.")


def _advance(outcome: ServerOutcome, state: ConnectionState) -> None:
    logger.debug("%s: %s -> %s", outcome.entry.name, outcome.state.value, state.value)
    outcome.state = state


def _fail(
    outcome: ServerOutcome,
    state: ConnectionState,
    exc: WfmError,
) -> ServerOutcome:
    logger.warning("Server %s (%s) failed: %s", outcome.entry.name, outcome.entry.url, exc)
    _advance(outcome, state)
    outcome.error = exc
    return outcome


def _truncate(path: Path) -> None:
    try:
        path.write_bytes(b"")
    except OSError:
        logger.warning("Could not truncate partial download %s", path)
