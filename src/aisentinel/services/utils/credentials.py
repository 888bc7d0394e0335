"""Session credential extraction.

One priority order for every endpoint:

1. ``Authorization: Bearer <token>``
2. ``X-Session-Token: <token>``
3. ``sessionToken=<token>`` cookie

The first source present wins; sources are never merged or cross-checked.
"""
from fastapi import Request
from aisentinel.config import SESSION_COOKIE_NAME, SESSION_HEADER_NAME


def _extract_bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2:
        return None
    scheme, value = parts[0].lower(), parts[1].strip()
    if scheme != "bearer" or not value:
        return None
    return value


def extract_session_token(request: Request) -> str | None:
    """Candidate session token from the request, or None if there is none."""
    token = _extract_bearer(request.headers.get("Authorization"))
    if token:
        return token

    token = (request.headers.get(SESSION_HEADER_NAME) or "").strip()
    if token:
        return token

    token = (request.cookies.get(SESSION_COOKIE_NAME) or "").strip()
    return token or None
