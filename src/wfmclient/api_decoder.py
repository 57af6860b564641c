"""Fetch WFM API responses and extract the payload embedded in the HTML."""

from __future__ import annotations

import logging
import re

import requests

logger = logging.getLogger(__name__)

OPEN_MARKER = '<div id="wfm-api">'
CLOSE_MARKER = "</div>"
DEFAULT_TIMEOUT = 30

_TAG_RE = re.compile(r"<[^>]*>")


class WfmError(Exception):
    """Base class for errors talking to a WFM server."""


class ConnectionFailed(WfmError):
    """Raised when the server cannot be reached or answers with an error."""


class MalformedResponse(WfmError):
    """Raised when a response does not carry the API marker region."""


def decode_api_payload(body: str) -> str:
    """Extract the API payload from an HTML response body.

    Takes the text between the first ``<div id="wfm-api">`` and the next
    ``</div>``, trims it, turns ``<br>`` into newlines and strips any other
    tags.
    """
    _, marker, tail = body.partition(OPEN_MARKER)
    if not marker:
        raise MalformedResponse(f"API marker {OPEN_MARKER!r} not found in response.")

    payload = tail.split(CLOSE_MARKER, 1)[0].strip()
    payload = payload.replace("<br>", "\n")
    return _TAG_RE.sub("", payload)


def fetch_api_content(
    url: str,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """GET *url* and return its decoded API payload.

    Bodies without a declared charset are read as UTF-8. The status code
    is not checked up front: some servers send the API region along with
    a non-2xx status, and it is used when present.
    """
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
        if "charset" not in resp.headers.get("Content-Type", ""):
            resp.encoding = "utf-8"
        body = resp.text
    except requests.RequestException as exc:
        raise ConnectionFailed(f"Could not connect to {url}: {exc}") from exc

    logger.debug("GET %s -> %s (%d bytes)", url, resp.status_code, len(body))

    try:
        return decode_api_payload(body)
    except MalformedResponse:
        if not resp.ok:
            raise ConnectionFailed(
                f"Server answered {resp.status_code} for {url}."
            ) from None
        raise
