"""Response error extraction for load test observability.

Kitchenline renders every failure as ``{"error": "message"}``; anything else
is reported raw so unexpected proxies or crashes still show up readably.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response."""
    try:
        body = response.json()
    except Exception:
        # Not JSON, return raw text truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and "error" in body:
        return str(body["error"])

    # Unknown shape
    return str(body)[:300]
