"""Server URL validation and file URL construction."""

from __future__ import annotations

from urllib.parse import urlparse


class ServerURLError(Exception):
    """Raised when a server URL cannot be used."""


def normalize_base_url(url: str) -> str:
    """Validate a WFM server base URL and return it stripped.

    Supported formats:
      - http://host/path/to/wfm/
      - https://host:8080/wfm/index.php
    """
    url = url.strip()
    if not url:
        raise ServerURLError("URL is empty.")

    parsed = urlparse(url)
    if not parsed.scheme:
        raise ServerURLError(f"Invalid URL (no scheme): {url}")
    if parsed.scheme not in ("http", "https"):
        raise ServerURLError(f"Unsupported scheme: {parsed.scheme}")
    if not parsed.hostname:
        raise ServerURLError(f"Invalid URL (no host): {url}")
    if parsed.query or parsed.fragment:
        raise ServerURLError(f"URL must not contain a query or fragment: {url}")

    return url


def build_file_url(base_url: str, path: str) -> str:
    """Return the download URL of *path* on the server at *base_url*.

    Only spaces are percent-encoded; other characters pass through as-is.
    """
    if not base_url.endswith("/"):
        base_url += "/"
    return (base_url + path).replace(" ", "%20")
