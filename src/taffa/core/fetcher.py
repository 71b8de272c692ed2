"""
Visitor count retrieval.

Performs a single unauthenticated GET against the configured endpoint and
turns every failure into a display string instead of raising.
"""

import logging
import re

import requests

from .result import FetchResult

logger = logging.getLogger(__name__)

EMPTY_BODY_ERROR = "Error: Empty response body"
UNKNOWN_ERROR = "Error: Unknown error"

_COUNT_PATTERN = re.compile(r"[+-]?[0-9]+")


def fetch_visitor_count(
    url: str,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> FetchResult:
    """
    Fetch the raw visitor count text from the server.

    Args:
        url: Endpoint returning the count as a plain-text body.
        session: Session to reuse between polls. A one-off request is made if None.
        timeout: Seconds before giving up. None keeps the client default.

    Returns:
        FetchResult with either the body or an error string of the form
        "Error: HTTP <code>", "Error: Empty response body" or "Error: <message>".
    """
    http = session if session is not None else requests
    try:
        response = http.get(url, timeout=timeout)
    except Exception as e:
        logger.error("Exception occurred while making network request", exc_info=True)
        message = str(e)
        return FetchResult(error=f"Error: {message}" if message else UNKNOWN_ERROR)

    if not 200 <= response.status_code < 300:
        logger.warning(f"Visitor count request failed: HTTP {response.status_code}")
        return FetchResult(error=f"Error: HTTP {response.status_code}")

    body = response.text
    if not body:
        logger.warning("Visitor count request returned an empty body")
        return FetchResult(error=EMPTY_BODY_ERROR)

    return FetchResult(body=body)


def parse_visitor_count(text: str | None) -> int:
    """
    Parse a response body as a visitor count.

    Anything that is not a plain base-10 integer, and any negative value,
    yields 0.
    """
    if text is None:
        return 0
    stripped = text.strip()
    if not _COUNT_PATTERN.fullmatch(stripped):
        logger.debug(f"Unparseable visitor count {stripped!r}, using 0")
        return 0
    return max(int(stripped), 0)
