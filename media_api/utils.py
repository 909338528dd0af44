"""Debug helpers for rendering outgoing requests."""

from __future__ import annotations

import json
import shlex
import urllib.parse

from .request import ParameterEncoding, TransportRequest


def full_url(request: TransportRequest) -> str:
    """Return the request URL with query parameters appended (GET/HEAD only)."""
    if request.encoding is not ParameterEncoding.QUERY or not request.params:
        return request.url
    query = urllib.parse.urlencode(request.params, doseq=True)
    sep = "&" if urllib.parse.urlparse(request.url).query else "?"
    return f"{request.url}{sep}{query}"


def to_curl(request: TransportRequest, session_headers: dict[str, str] | None = None) -> str:
    """
    Render *request* as an equivalent ``curl`` command line.

    Session-level headers are merged first so the output shows what is
    actually sent.  ``Authorization`` values are masked.
    """
    parts = ["curl", "-v", "-X", request.method.value]
    headers = dict(session_headers or {})
    headers.update(request.headers)
    for name, value in sorted(headers.items()):
        if name.lower() == "authorization":
            value = "***"
        parts += ["-H", f"{name}: {value}"]
    if request.encoding is ParameterEncoding.JSON and request.json is not None:
        parts += ["-d", json.dumps(request.json, default=str)]
    parts.append(full_url(request))
    return " ".join(shlex.quote(p) for p in parts)
