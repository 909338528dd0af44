"""
Loading-indicator collaborators.

An indicator only has to expose ``start()`` and ``stop()``; requests call
them around the network call when ``show_indicator`` is set and never look
at a return value.
"""

from __future__ import annotations

import sys
import threading

from .logging_setup import log

try:
    from tqdm import tqdm as _tqdm
    _TQDM_AVAILABLE = True
except ImportError:
    _TQDM_AVAILABLE = False


class LoadingIndicator:
    def start(self) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError


class NullIndicator(LoadingIndicator):
    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass


class LogIndicator(LoadingIndicator):
    def __init__(self, message: str = "Loading") -> None:
        self.message = message

    def start(self) -> None:
        log.info("%s…", self.message)

    def stop(self) -> None:
        log.info("%s done.", self.message)


class SpinnerIndicator(LoadingIndicator):
    """Terminal spinner driven by ``tqdm`` (install the ``ui`` extra)."""

    def __init__(self, message: str = "Loading", interval: float = 0.1, file=None) -> None:
        if not _TQDM_AVAILABLE:
            raise RuntimeError("SpinnerIndicator needs tqdm. Run:  pip install media-api-client[ui]")
        self.message = message
        self.interval = interval
        self.file = file or sys.stderr
        self._bar = None
        self._done = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        self._done.clear()
        self._bar = _tqdm(
            desc=self.message,
            bar_format="{desc} {elapsed}",
            leave=False,
            file=self.file,
        )
        self._thread = threading.Thread(target=self._tick, daemon=True)
        self._thread.start()

    def _tick(self) -> None:
        while not self._done.wait(self.interval):
            self._bar.refresh()

    def stop(self) -> None:
        self._done.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None
        if self._bar is not None:
            self._bar.close()
            self._bar = None


def default_indicator() -> LoadingIndicator:
    """Spinner when tqdm is installed, log lines otherwise."""
    if _TQDM_AVAILABLE:
        return SpinnerIndicator()
    return LogIndicator()


class IndicatorGuard:
    """
    Scoped start/stop around one request.

    ``stop()`` may be reached from the completion callback, from dispose
    and from a synchronous encoding failure; the indicator is stopped at
    most once and only if it was started.
    """

    def __init__(self, indicator: LoadingIndicator, enabled: bool) -> None:
        self.indicator = indicator
        self.enabled = enabled
        self._lock = threading.Lock()
        self._started = False
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._started and not self._stopped

    def start(self) -> None:
        with self._lock:
            if not self.enabled or self._started:
                return
            self._started = True
        self.indicator.start()

    def stop(self) -> None:
        with self._lock:
            if not self._started or self._stopped:
                return
            self._stopped = True
        self.indicator.stop()

    def __enter__(self) -> "IndicatorGuard":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
