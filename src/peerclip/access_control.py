#!/usr/bin/env python3
"""Network access control for the HTTP surface.

Two checks guard every request, and both must pass:
- the caller's IP address must start with the allow-list prefix
- a browser Origin header, when present, must name a host that starts
  with the same prefix

Rejected requests get 403 before any handler runs.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse

from peerclip.errors import AccessDeniedError

if TYPE_CHECKING:
    from starlette.middleware.base import RequestResponseEndpoint
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


def normalize_address(host: str | None) -> str:
    """Return host as dotted IPv4 when it is an IPv4-mapped IPv6 address.

    Args:
        host: Caller address as reported by the server, may be None.

    Returns:
        The normalized address, "" for None, host unchanged if unparsable.
    """
    if not host:
        return ""
    try:
        ip = ipaddress.ip_address(host.split("%", 1)[0])
    except ValueError:
        return host
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return str(ip.ipv4_mapped)
    return str(ip)


def address_allowed(host: str | None, allowed_prefix: str) -> bool:
    """True if the normalized caller address starts with allowed_prefix."""
    return normalize_address(host).startswith(allowed_prefix)


def origin_allowed(origin: str, allowed_prefix: str) -> bool:
    """True if origin is an absolute URL whose host starts with allowed_prefix."""
    parts = urlsplit(origin)
    if not parts.scheme or not parts.hostname:
        return False
    return parts.hostname.startswith(allowed_prefix)


def origin_regex(allowed_prefix: str) -> str:
    """Regex matching browser origins on the allowed segment, for CORS."""
    return r"https?://" + re.escape(allowed_prefix) + r"[^/:]*(:\d+)?"


def check_access(host: str | None, origin: str | None, allowed_prefix: str) -> None:
    """Validate a caller against the allow-list.

    Args:
        host: Caller IP address.
        origin: Value of the Origin header, or None.
        allowed_prefix: Required address prefix.

    Raises:
        AccessDeniedError: If either check fails.
    """
    address = normalize_address(host)
    if not address.startswith(allowed_prefix):
        raise AccessDeniedError(
            f"Request from {address or 'unknown'} — not in subnet {allowed_prefix}*"
        )
    if origin is not None and not origin_allowed(origin, allowed_prefix):
        raise AccessDeniedError(
            f"Request from {address} with origin {origin} — not in subnet {allowed_prefix}*"
        )


class AccessControlMiddleware(BaseHTTPMiddleware):
    """Reject callers outside the allowed segment with 403."""

    def __init__(self, app: ASGIApp, allowed_prefix: str) -> None:
        super().__init__(app)
        self.allowed_prefix = allowed_prefix

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        host = request.client.host if request.client else None
        try:
            check_access(host, request.headers.get("origin"), self.allowed_prefix)
        except AccessDeniedError as e:
            logger.warning("[REJECTED] %s", e)
            return PlainTextResponse(
                f"403 Forbidden — only Wi-Fi Direct clients "
                f"({self.allowed_prefix}x) are allowed.",
                status_code=403,
            )
        return await call_next(request)
