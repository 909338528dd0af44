"""Configuration constants for the media API client."""

import os
from http import HTTPStatus

# Seconds before an in-flight request is abandoned by the transport.
# Can be overridden with the MEDIA_API_TIMEOUT env var.
REQUEST_TIMEOUT = float(os.environ.get("MEDIA_API_TIMEOUT", "1200"))

# Worker threads backing the default transport
TRANSPORT_WORKERS = int(os.environ.get("MEDIA_API_WORKERS", "4"))

VERIFY_SSL = os.environ.get("MEDIA_API_VERIFY_SSL", "1").lower() not in ("0", "false", "no")

USER_AGENT = "media-api-client/1.0"

CONTENT_TYPE = "application/json"

# Responses with this status short-circuit to an Unauthorized failure
UNAUTHORIZED_STATUS = int(HTTPStatus.UNAUTHORIZED)

# Methods whose parameters travel in the query string; all others use a JSON body
QUERY_ENCODED_METHODS = frozenset(["GET", "HEAD"])

# Characters left untouched when percent-encoding a target address.
# Mirrors the URL-query-allowed set: alphanumerics plus these symbols.
# '%' is not in the set, so pre-encoded sequences are escaped again.
URL_QUERY_SAFE = "!$&'()*+,-./:;=?@_~"

# Statuses that legitimately carry no body; they decode to None
EMPTY_BODY_STATUSES = frozenset([204, 205])
