"""
Request configuration values and their wire encoding.

A :class:`RequestSpec` is what the caller configures; a
:class:`TransportRequest` is what the transport sends.  The step between
them (``build_transport_request``) percent-encodes the address, picks the
parameter encoding from the method and attaches the fixed headers.
"""

from __future__ import annotations

import enum
import urllib.parse
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .config import CONTENT_TYPE, QUERY_ENCODED_METHODS, REQUEST_TIMEOUT, URL_QUERY_SAFE
from .errors import EncodingError


class HTTPMethod(str, enum.Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

    @classmethod
    def coerce(cls, value: "HTTPMethod | str") -> "HTTPMethod":
        """Accept an enum member or a verb in any case ('post', 'Post', …)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {value!r}") from None


class ParameterEncoding(enum.Enum):
    QUERY = "query"
    JSON = "json"


def encoding_for(method: HTTPMethod | str) -> ParameterEncoding:
    """GET and HEAD carry parameters in the query string, everything else in a JSON body."""
    if HTTPMethod.coerce(method).value in QUERY_ENCODED_METHODS:
        return ParameterEncoding.QUERY
    return ParameterEncoding.JSON


def default_headers() -> dict[str, str]:
    # Authorization is attached by the session (or a custom transport),
    # never by the request itself.
    return {"Content-Type": CONTENT_TYPE}


def encode_address(address: Any) -> str:
    """
    Percent-encode *address* for transmission.

    Alphanumerics and ``!$&'()*+,-./:;=?@_~`` are kept; every other
    character is escaped, including ``%`` itself.  No structural URL
    validation is done here: a malformed address is only rejected by the
    transport when the request runs.

    Raises EncodingError when there is no address or it cannot be encoded
    as UTF-8 (e.g. lone surrogates).
    """
    if not isinstance(address, str):
        raise EncodingError(f"Cannot encode target address {address!r}")
    try:
        return urllib.parse.quote(address, safe=URL_QUERY_SAFE)
    except UnicodeEncodeError as exc:
        raise EncodingError(f"Cannot encode target address {address!r}: {exc}") from exc


def query_components(key: str, value: Any) -> list[tuple[str, str]]:
    """
    Flatten one parameter into query-string pairs using bracket notation.

    ``{"filter": {"type": "video"}}`` becomes ``filter[type]=video`` and
    ``{"ids": [1, 2]}`` becomes ``ids[]=1&ids[]=2``.  Booleans are sent
    as ``1`` / ``0`` and None as an empty value.
    """
    if isinstance(value, Mapping):
        pairs: list[tuple[str, str]] = []
        for sub_key in sorted(value, key=str):
            pairs += query_components(f"{key}[{sub_key}]", value[sub_key])
        return pairs
    if isinstance(value, (list, tuple, set, frozenset)):
        pairs = []
        for item in value:
            pairs += query_components(f"{key}[]", item)
        return pairs
    if isinstance(value, bool):
        return [(key, "1" if value else "0")]
    if value is None:
        return [(key, "")]
    return [(key, str(value))]


def encode_query(parameters: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Flatten *parameters* into ordered pairs, top-level keys sorted."""
    pairs: list[tuple[str, str]] = []
    for key in sorted(parameters, key=str):
        pairs += query_components(str(key), parameters[key])
    return pairs


@dataclass(frozen=True)
class RequestSpec:
    """Immutable snapshot of a configured request."""

    target: str | None = None
    method: HTTPMethod = HTTPMethod.GET
    parameters: Mapping[str, Any] | None = None
    show_indicator: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HTTPMethod.coerce(self.method))
        if self.parameters is not None:
            # Detach from the caller's dict so later mutation cannot leak in
            object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def encoding(self) -> ParameterEncoding:
        return encoding_for(self.method)


@dataclass(frozen=True)
class TransportRequest:
    """Fully encoded request as handed to a transport."""

    method: HTTPMethod
    url: str
    encoding: ParameterEncoding
    params: list[tuple[str, str]] | None = None
    json: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=default_headers)
    timeout: float = REQUEST_TIMEOUT

    def as_requests_kwargs(self) -> dict[str, Any]:
        """Keyword arguments accepted by both ``requests.Request`` and ``Session.request``."""
        kwargs: dict[str, Any] = {
            "method": self.method.value,
            "url": self.url,
            "headers": dict(self.headers),
        }
        if self.params is not None:
            kwargs["params"] = self.params
        if self.json is not None:
            kwargs["json"] = self.json
        return kwargs


def build_transport_request(spec: RequestSpec, timeout: float = REQUEST_TIMEOUT) -> TransportRequest:
    """Encode *spec* for the wire.  Raises EncodingError before any I/O."""
    url = encode_address(spec.target)
    encoding = spec.encoding
    params = dict(spec.parameters) if spec.parameters is not None else None
    return TransportRequest(
        method=spec.method,
        url=url,
        encoding=encoding,
        params=encode_query(params) if params is not None and encoding is ParameterEncoding.QUERY else None,
        json=params if encoding is ParameterEncoding.JSON else None,
        headers=default_headers(),
        timeout=timeout,
    )
