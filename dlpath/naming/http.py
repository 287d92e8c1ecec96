"""Build naming requests from HTTP responses."""

from __future__ import annotations

from typing import Optional

import requests

from dlpath.core.models import DestinationKind, NamingRequest


def parse_mime_type(content_type: Optional[str]) -> Optional[str]:
    """Strip parameters from a Content-Type value: ``text/html; charset=utf-8`` -> ``text/html``."""
    if not content_type:
        return None
    mime_type = content_type.split(";", 1)[0].strip().lower()
    return mime_type or None


def naming_request_from_response(
    response: requests.Response,
    destination: DestinationKind,
    hint: Optional[str] = None,
) -> NamingRequest:
    """Collect the naming signals of ``response``.

    The final URL after redirects is used, since that is what the server
    named the resource.
    """
    headers = response.headers
    return NamingRequest(
        url=response.url,
        destination=destination,
        hint=hint,
        content_disposition=headers.get("Content-Disposition"),
        content_location=headers.get("Content-Location"),
        mime_type=parse_mime_type(headers.get("Content-Type")),
    )
