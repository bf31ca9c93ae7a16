from __future__ import annotations

from collections.abc import Callable

from fastapi import Request, Response


async def security_headers_middleware(request: Request, call_next: Callable) -> Response:
    """Harden every geocache response.

    Answers describe where a caller is, so shared proxies must not keep them
    (``Cache-Control: private``) and browsers may only use geolocation from
    this origin. Headers already set by a route win.
    """
    response = await call_next(request)
    headers = response.headers
    headers.setdefault("X-Content-Type-Options", "nosniff")
    headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    headers.setdefault("Permissions-Policy", "geolocation=(self)")
    headers.setdefault("Cache-Control", "private, max-age=0")
    return response
