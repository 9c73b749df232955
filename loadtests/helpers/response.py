"""Response error extraction for load test observability.

Parses marketplace API error responses into human-readable messages.
Errors arrive as {"success": false, "message": "..."}; anything else is
stringified and truncated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message suitable for Locust failure lines."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and "message" in body:
        return str(body["message"])

    return str(body)[:300]


def bearer(token: str) -> dict:
    """Authorization header for a token returned by /auth/register or /auth/login."""
    return {"Authorization": f"Bearer {token}"}
