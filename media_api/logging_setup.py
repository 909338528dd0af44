"""
Logging configuration for the media API client.

Everything the package logs goes through the ``media-api`` logger.
Request lines (cURL equivalents, outcomes) are DEBUG; only the CLI and
the indicator log at INFO or above.  The ``urllib3`` connection logger
follows the same debug switch so both sides of a call show up together.
"""

import logging
from pathlib import Path

try:
    import colorlog
    _COLORLOG_AVAILABLE = True
except ImportError:
    _COLORLOG_AVAILABLE = False

log = logging.getLogger("media-api")

_CONSOLE_FMT = "%(asctime)s [%(levelname)s] %(message)s"
_CONSOLE_DATEFMT = "%H:%M:%S"
_FILE_FMT = "%(asctime)s [%(levelname)s] %(threadName)s %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers whose verbosity tracks --debug
_WIRE_LOGGERS = ("urllib3",)


def _console_handler() -> logging.Handler:
    if not _COLORLOG_AVAILABLE:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_CONSOLE_FMT, datefmt=_CONSOLE_DATEFMT))
        return handler
    handler = colorlog.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(
        "%(log_color)s" + _CONSOLE_FMT.replace(" %(message)s", "%(reset)s %(message)s"),
        datefmt=_CONSOLE_DATEFMT,
        log_colors={
            "DEBUG":    "cyan",
            "INFO":     "green",
            "WARNING":  "yellow",
            "ERROR":    "red",
            "CRITICAL": "bold_red",
        },
    ))
    return handler


def setup_logging(debug: bool = False, log_file: str | None = None) -> None:
    """
    Configure the package logger.

    Args:
        debug:    DEBUG level for ``media-api`` and the wire loggers
                  (INFO / WARNING otherwise).
        log_file: Also write full DEBUG detail, with the worker thread
                  name, to this path.
    """
    log.setLevel(logging.DEBUG if debug or log_file else logging.INFO)
    log.handlers.clear()

    console = _console_handler()
    console.setLevel(logging.DEBUG if debug else logging.INFO)
    log.addHandler(console)

    for name in _WIRE_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FMT, datefmt=_FILE_DATEFMT))
        log.addHandler(fh)
        log.debug("Logging to file: %s", log_path.resolve())
