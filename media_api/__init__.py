"""
media_api
=========
Single-shot HTTP request builder for JSON APIs.

Configure a target, method, parameters and an optional loading indicator,
then dispatch exactly one call and receive exactly one outcome.

Package structure
-----------------
media_api/
├── __init__.py       – package init and public API
├── config.py         – configuration constants (env-overridable)
├── errors.py         – error taxonomy and transport-error classification
├── outcome.py        – Success / Failure terminal outcomes
├── request.py        – RequestSpec, method → parameter encoding, address encoding
├── session.py        – requests.Session factory
├── transport.py      – threaded requests transport with cancellation
├── indicator.py      – loading-indicator collaborators
├── manager.py        – APIRequest builder/emitter
├── utils.py          – cURL rendering for debug logs
├── logging_setup.py  – package logger configuration
└── cli.py            – argparse CLI (``python -m media_api``)

Quick start
-----------
    from media_api import APIRequest, RequestsTransport

    with RequestsTransport() as transport:
        outcome = (
            APIRequest(transport)
            .set_target("https://api.example.com/items")
            .set_parameters({"page": "1"})
            .execute()
            .result()
        )
    print(outcome.value if outcome.ok else outcome.error)
"""

from .errors import (
    APIError,
    AlreadySubscribedError,
    EncodingError,
    ErrorKind,
    NoConnectionError,
    RequestFailedError,
    RequestFrozenError,
    UnauthorizedError,
)
from .indicator import IndicatorGuard, LoadingIndicator, LogIndicator, NullIndicator, SpinnerIndicator
from .manager import APIRequest, Subscription, build_request
from .outcome import Failure, Outcome, Success
from .request import HTTPMethod, ParameterEncoding, RequestSpec, TransportRequest
from .transport import (
    RequestsTransport,
    Transport,
    TransportCall,
    TransportClosedError,
    TransportResponse,
)

__all__ = [
    "APIRequest",
    "Subscription",
    "build_request",
    "RequestSpec",
    "TransportRequest",
    "HTTPMethod",
    "ParameterEncoding",
    "Transport",
    "TransportCall",
    "TransportResponse",
    "TransportClosedError",
    "RequestsTransport",
    "LoadingIndicator",
    "NullIndicator",
    "LogIndicator",
    "SpinnerIndicator",
    "IndicatorGuard",
    "Success",
    "Failure",
    "Outcome",
    "APIError",
    "ErrorKind",
    "UnauthorizedError",
    "NoConnectionError",
    "RequestFailedError",
    "EncodingError",
    "AlreadySubscribedError",
    "RequestFrozenError",
]
