"""
media_api.manager
=================
Single-shot request builder and emitter.

An :class:`APIRequest` is configured with chained setters, then consumed
by exactly one :meth:`~APIRequest.subscribe` call which dispatches one HTTP
call and delivers exactly one terminal event to the listener:

* ``on_next(body)`` followed by ``on_completed()`` on success
* ``on_error(APIError)`` on failure
* nothing at all if the subscription is disposed first

Usage::

    subscription = (
        APIRequest(transport)
        .set_target("https://api.example.com/items")
        .set_parameters({"page": "1"})
        .set_show_indicator(True)
        .subscribe(on_next=print, on_error=handle_error)
    )

:meth:`~APIRequest.execute` and :meth:`~APIRequest.as_observable` expose the
same call as a ``concurrent.futures.Future`` or a ``reactivex`` Observable.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from concurrent.futures import Future, InvalidStateError
from typing import Any, Callable, Mapping

import reactivex
from reactivex.disposable import Disposable

from .config import REQUEST_TIMEOUT, UNAUTHORIZED_STATUS
from .errors import (
    AlreadySubscribedError,
    APIError,
    RequestFrozenError,
    UnauthorizedError,
    classify_transport_error,
)
from .indicator import IndicatorGuard, LoadingIndicator, NullIndicator
from .logging_setup import log
from .outcome import Failure, Outcome, Success
from .request import HTTPMethod, RequestSpec, build_transport_request
from .transport import RequestsTransport, Transport, TransportCall, TransportResponse
from .utils import to_curl

_default_transport: Transport | None = None
_default_transport_lock = threading.Lock()


def default_transport() -> Transport:
    """Lazily created transport used when a request is built without one."""
    global _default_transport
    with _default_transport_lock:
        if _default_transport is None:
            _default_transport = RequestsTransport()
        return _default_transport


class _CallbackObserver:
    def __init__(
        self,
        on_next: Callable[[Any], None] | None = None,
        on_error: Callable[[APIError], None] | None = None,
        on_completed: Callable[[], None] | None = None,
    ) -> None:
        self._on_next = on_next
        self._on_error = on_error
        self._on_completed = on_completed

    def on_next(self, value: Any) -> None:
        if self._on_next is not None:
            self._on_next(value)

    def on_error(self, error: APIError) -> None:
        if self._on_error is not None:
            self._on_error(error)
        else:
            log.warning("Unhandled request error: %s", error)

    def on_completed(self) -> None:
        if self._on_completed is not None:
            self._on_completed()


class _FutureObserver:
    """Collapses the event triple into one Outcome on a Future."""

    def __init__(self, future: Future) -> None:
        self._future = future
        self._value: Any = None

    def on_next(self, value: Any) -> None:
        self._value = value

    def on_completed(self) -> None:
        self._settle(Success(self._value))

    def on_error(self, error: APIError) -> None:
        self._settle(Failure(error))

    def _settle(self, outcome: Outcome) -> None:
        if self._future.cancelled():
            return
        try:
            self._future.set_result(outcome)
        except InvalidStateError:
            log.debug("Future cancelled while delivering %r", outcome)


class Subscription:
    """Handle returned by :meth:`APIRequest.subscribe`; disposing it cancels the call."""

    def __init__(self, request: "APIRequest") -> None:
        self._request = request

    @property
    def disposed(self) -> bool:
        return self._request._disposed

    def dispose(self) -> None:
        self._request._dispose()

    cancel = dispose


class APIRequest:
    """
    Fluent configuration plus one-shot execution of a single HTTP call.

    Args:
        transport:       Collaborator that performs the call.  A shared
                         :class:`RequestsTransport` is used when omitted.
        indicator:       Loading indicator driven when ``show_indicator`` is set.
        on_unauthorized: Called with the RequestSpec before a 401 failure
                         is delivered (e.g. to trigger a logout flow).
        timeout:         Seconds the transport waits for the server.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        indicator: LoadingIndicator | None = None,
        on_unauthorized: Callable[[RequestSpec], None] | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.transport = transport
        self.indicator = indicator if indicator is not None else NullIndicator()
        self.on_unauthorized = on_unauthorized
        self.timeout = timeout

        self._spec = RequestSpec()
        self._lock = threading.Lock()
        self._observer: Any = None
        self._call: TransportCall | None = None
        self._guard: IndicatorGuard | None = None
        self._terminated = False
        self._disposed = False

    @classmethod
    def from_spec(cls, spec: RequestSpec, **kwargs) -> "APIRequest":
        req = cls(**kwargs)
        req._spec = spec
        return req

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def spec(self) -> RequestSpec:
        return self._spec

    def _update(self, **changes) -> "APIRequest":
        if self._observer is not None:
            raise RequestFrozenError("Request already dispatched; create a new APIRequest")
        self._spec = dataclasses.replace(self._spec, **changes)
        return self

    def set_target(self, address: str) -> "APIRequest":
        return self._update(target=address)

    def set_method(self, method: HTTPMethod | str) -> "APIRequest":
        return self._update(method=HTTPMethod.coerce(method))

    def set_parameters(self, parameters: Mapping[str, Any] | None) -> "APIRequest":
        return self._update(parameters=parameters)

    def set_show_indicator(self, flag: bool) -> "APIRequest":
        return self._update(show_indicator=bool(flag))

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def subscribe(
        self,
        observer: Any = None,
        *,
        on_next: Callable[[Any], None] | None = None,
        on_error: Callable[[APIError], None] | None = None,
        on_completed: Callable[[], None] | None = None,
    ) -> Subscription:
        """
        Dispatch the request and register the only listener.

        *observer* is any object with ``on_next`` / ``on_error`` /
        ``on_completed``; alternatively pass the callbacks individually.

        Raises:
            AlreadySubscribedError: a listener is already registered.
            EncodingError: the target address cannot be encoded; raised
                before any network I/O, with the indicator already stopped.
        """
        with self._lock:
            if self._observer is not None:
                raise AlreadySubscribedError("APIRequest supports a single subscriber")
            self._observer = observer if observer is not None else _CallbackObserver(
                on_next, on_error, on_completed,
            )

        spec = self._spec
        guard = self._guard = IndicatorGuard(self.indicator, spec.show_indicator)
        guard.start()
        try:
            request = build_transport_request(spec, self.timeout)
        except APIError:
            guard.stop()
            raise

        transport = self.transport if self.transport is not None else default_transport()
        if log.isEnabledFor(logging.DEBUG):
            session = getattr(transport, "session", None)
            log.debug("cURL request: %s", to_curl(request, getattr(session, "headers", None)))

        subscription = Subscription(self)
        try:
            call = transport.send(request, self._on_response)
        except Exception:
            guard.stop()
            raise
        with self._lock:
            self._call = call
        return subscription

    def execute(self) -> Future:
        """
        Dispatch the request and return a Future resolving to an Outcome.

        Cancelling the Future disposes the underlying subscription.
        """
        future: Future = Future()
        subscription = self.subscribe(_FutureObserver(future))
        future.add_done_callback(lambda f: subscription.dispose() if f.cancelled() else None)
        return future

    def as_observable(self) -> reactivex.Observable:
        """Wrap the request as a cold Observable; subscribing dispatches the call."""

        def _subscribe(observer, scheduler=None):
            subscription = self.subscribe(observer)
            return Disposable(subscription.dispose)

        return reactivex.create(_subscribe)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _on_response(self, response: TransportResponse) -> None:
        with self._lock:
            if self._disposed or self._terminated:
                return
            self._terminated = True

        self._stop_indicator()

        outcome = self._resolve(response)
        log.debug("%s %s finished: %r", self._spec.method.value, self._spec.target, outcome)
        observer = self._observer
        if isinstance(outcome, Success):
            observer.on_next(outcome.value)
            observer.on_completed()
        else:
            observer.on_error(outcome.error)

    def _resolve(self, response: TransportResponse) -> Outcome:
        if response.status_code == UNAUTHORIZED_STATUS:
            if self.on_unauthorized is not None:
                try:
                    self.on_unauthorized(self._spec)
                except Exception:
                    log.exception("on_unauthorized hook failed")
            return Failure(UnauthorizedError(self._spec.target))

        if not response.ok:
            return Failure(classify_transport_error(response.error))

        try:
            body = response.decode()
        except ValueError as exc:
            return Failure(classify_transport_error(exc))
        return Success(body)

    def _dispose(self) -> None:
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            call = self._call
            terminated = self._terminated
        if call is not None and not terminated:
            call.cancel()
        self._stop_indicator()

    def _stop_indicator(self) -> None:
        if self._guard is None:
            return
        try:
            self._guard.stop()
        except Exception:
            log.exception("Loading indicator failed to stop")


def build_request(
    target: str,
    method: HTTPMethod | str = HTTPMethod.GET,
    parameters: Mapping[str, Any] | None = None,
    show_indicator: bool = False,
    **kwargs,
) -> APIRequest:
    """Build a fully configured :class:`APIRequest` in one call."""
    spec = RequestSpec(
        target=target,
        method=HTTPMethod.coerce(method),
        parameters=parameters,
        show_indicator=show_indicator,
    )
    return APIRequest.from_spec(spec, **kwargs)
