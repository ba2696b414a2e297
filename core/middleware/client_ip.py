"""
Client origin middleware.

Resolves the network origin of each request once and stores it on
request.client_ip for the verification views.
"""

import logging
from typing import Callable, Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse

from core.domain.value_objects import IPAddress

logger = logging.getLogger(__name__)


def strip_port(raw: str) -> str:
    """Drop a port suffix: "[2001:db8::1]:443" and "1.2.3.4:5678" keep only the host."""
    if raw.startswith("[") and "]" in raw:
        return raw[1:raw.index("]")]
    host, sep, port = raw.partition(":")
    if sep and port.isdigit():
        return host
    return raw


def resolve_client_ip(request: HttpRequest) -> Optional[str]:
    """
    Determine the client origin of a request.

    The first entry of the configured forwarded-for header wins when
    LICENSE_TRUST_FORWARDED_FOR is enabled, otherwise REMOTE_ADDR is used.
    A port suffix is dropped and valid addresses are normalized; anything
    else is returned stripped.

    Args:
        request: HTTP request

    Returns:
        Client origin, or None if the request carries none
    """
    raw = None
    if getattr(settings, "LICENSE_TRUST_FORWARDED_FOR", False):
        header = getattr(settings, "LICENSE_CLIENT_IP_HEADER", "X-Forwarded-For")
        forwarded = request.headers.get(header, "")
        raw = forwarded.split(",")[0].strip() or None

    if raw is None:
        raw = (request.META.get("REMOTE_ADDR") or "").strip() or None

    if raw is None:
        return None

    address = IPAddress.parse(strip_port(raw))
    if address is None:
        logger.debug("Client origin %r is not an IP address, using it verbatim", raw)
        return raw
    return str(address)


class ClientIPMiddleware:
    """Middleware attaching the resolved client origin to the request."""

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request.client_ip = resolve_client_ip(request)  # type: ignore
        return self.get_response(request)
