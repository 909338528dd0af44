"""
Error taxonomy for API requests.

Every failure delivered to a listener is an :class:`APIError` whose
``kind`` tells the caller which recovery path applies:

* ``UNAUTHORIZED``     – the server answered 401; body was not inspected
* ``NO_CONNECTION``    – the transport could not reach the server
* ``OTHER``            – any other transport or decoding failure (wrapped)
* ``ENCODING_FAILURE`` – the target address could not be percent-encoded

Misuse of a request object (subscribing twice, reconfiguring after
dispatch) raises ``RuntimeError`` subclasses instead.
"""

from __future__ import annotations

import enum

import requests


class ErrorKind(enum.Enum):
    UNAUTHORIZED = "unauthorized"
    NO_CONNECTION = "no_connection"
    OTHER = "other"
    ENCODING_FAILURE = "encoding_failure"


class APIError(Exception):
    """Base class for failures surfaced to a request listener."""

    kind: ErrorKind = ErrorKind.OTHER


class UnauthorizedError(APIError):
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, url: str | None = None) -> None:
        super().__init__(f"Unauthorized: {url}" if url else "Unauthorized")
        self.url = url


class NoConnectionError(APIError):
    kind = ErrorKind.NO_CONNECTION

    def __init__(self, error: BaseException | None = None) -> None:
        super().__init__("No internet connection")
        self.error = error


class RequestFailedError(APIError):
    """Wraps the underlying transport or decoding error unchanged in ``error``."""

    kind = ErrorKind.OTHER

    def __init__(self, error: BaseException) -> None:
        super().__init__(str(error) or type(error).__name__)
        self.error = error


class EncodingError(APIError, ValueError):
    """The target address is missing or cannot be percent-encoded."""

    kind = ErrorKind.ENCODING_FAILURE


class AlreadySubscribedError(RuntimeError):
    """A request instance accepts exactly one listener."""


class RequestFrozenError(RuntimeError):
    """Raised when a request is reconfigured after it has been dispatched."""


# Transport failures that mean the server was never reached
_CONNECTIVITY_ERRORS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
)


def is_connectivity_error(exc: BaseException) -> bool:
    """Return True when *exc* signals a missing session or network path."""
    return isinstance(exc, _CONNECTIVITY_ERRORS)


def classify_transport_error(exc: BaseException) -> APIError:
    """Map a raw transport exception onto the request error taxonomy."""
    if isinstance(exc, APIError):
        return exc
    if is_connectivity_error(exc):
        error: APIError = NoConnectionError(exc)
    else:
        error = RequestFailedError(exc)
    error.__cause__ = exc
    return error
