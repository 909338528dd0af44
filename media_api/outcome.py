"""Terminal outcomes of a single API request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .errors import APIError, ErrorKind


@dataclass(frozen=True)
class Success:
    value: Any

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: APIError

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def unwrap(self) -> Any:
        """Raise the carried error; a failure has no value."""
        raise self.error


Outcome = Union[Success, Failure]
