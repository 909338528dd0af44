"""
HTTP transport collaborator.

A transport takes one :class:`~media_api.request.TransportRequest`, runs it
off the calling thread and reports back through a completion callback
with a :class:`TransportResponse`.  The returned :class:`TransportCall`
lets the caller abort the call.

The default :class:`RequestsTransport` drives a shared
``requests.Session`` from a small thread pool.
"""

from __future__ import annotations

import functools
import json
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

import requests

from .config import EMPTY_BODY_STATUSES, TRANSPORT_WORKERS
from .logging_setup import log
from .request import HTTPMethod, TransportRequest
from .session import build_session


class TransportResponse:
    """Status and raw body of a finished call, or the error that ended it.

    The body is decoded only when :meth:`decode` is called.
    """

    def __init__(
        self,
        status_code: int | None = None,
        content: bytes = b"",
        error: BaseException | None = None,
        method: HTTPMethod | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.error = error
        self.method = method
        self.headers = headers or {}

    @classmethod
    def from_requests(cls, resp: requests.Response, method: HTTPMethod | None = None) -> "TransportResponse":
        return cls(
            status_code=resp.status_code,
            content=resp.content,
            method=method,
            headers=dict(resp.headers),
        )

    @property
    def ok(self) -> bool:
        """True when the transport produced a response (any status)."""
        return self.error is None

    def decode(self) -> Any:
        """
        Parse the body as JSON.

        An empty body decodes to None for 204/205 and HEAD responses and is
        an error otherwise.  Raises ValueError on malformed JSON.
        """
        if self.error is not None:
            raise self.error
        if not self.content.strip():
            if self.status_code in EMPTY_BODY_STATUSES or self.method is HTTPMethod.HEAD:
                return None
            raise ValueError(f"Response body is empty (status {self.status_code})")
        return json.loads(self.content)

    def __repr__(self) -> str:
        if self.error is not None:
            return f"<TransportResponse error={self.error!r}>"
        return f"<TransportResponse [{self.status_code}] {len(self.content)} bytes>"


class TransportCall:
    """Cancellation handle for one in-flight call."""

    def __init__(self) -> None:
        self._cancelled = threading.Event()
        self._future: Future | None = None

    def _attach(self, future: Future) -> None:
        self._future = future
        if self.cancelled:
            future.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """
        Ask the transport to abort.

        A queued call never starts.  A running call finishes in the
        background but its completion callback is suppressed.
        """
        self._cancelled.set()
        if self._future is not None:
            self._future.cancel()


class TransportClosedError(RuntimeError):
    """The transport was closed while a call was still queued."""


Callback = Callable[[TransportResponse], None]


class Transport:
    """Interface every transport implements."""

    def send(self, request: TransportRequest, callback: Callback) -> TransportCall:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class RequestsTransport(Transport):
    """Runs each request through ``requests`` on a worker thread."""

    def __init__(
        self,
        session: requests.Session | None = None,
        max_workers: int = TRANSPORT_WORKERS,
    ) -> None:
        self._owns_session = session is None
        self.session = session if session is not None else build_session()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="media-api",
        )

    def send(self, request: TransportRequest, callback: Callback) -> TransportCall:
        call = TransportCall()
        future = self._executor.submit(self._perform, request, call)
        call._attach(future)
        future.add_done_callback(functools.partial(self._deliver, call, callback))
        return call

    def _perform(self, request: TransportRequest, call: TransportCall) -> TransportResponse | None:
        if call.cancelled:
            return None
        resp = self.session.request(timeout=request.timeout, **request.as_requests_kwargs())
        log.debug("%s %s -> %d", request.method.value, resp.url, resp.status_code)
        return TransportResponse.from_requests(resp, request.method)

    @staticmethod
    def _deliver(call: TransportCall, callback: Callback, future: Future) -> None:
        if call.cancelled:
            log.debug("Call cancelled; completion suppressed")
            return
        if future.cancelled():
            # Dropped by close() while still queued; the caller never cancelled
            callback(TransportResponse(error=TransportClosedError("Transport closed before the call ran")))
            return
        exc = future.exception()
        if exc is not None:
            callback(TransportResponse(error=exc))
        else:
            callback(future.result())

    def close(self) -> None:
        """Stop accepting calls; queued ones complete with TransportClosedError."""
        self._executor.shutdown(wait=False, cancel_futures=True)
        if self._owns_session:
            self.session.close()
