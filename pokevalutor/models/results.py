"""Outcomes of a single remote fetch.

Fetch failures are values rather than exceptions so callers can branch on
them as ordinary control flow when choosing a fallback.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FetchOk:
    payload: dict[str, Any]

    @property
    def is_empty(self) -> bool:
        data = self.payload.get("data")
        return not isinstance(data, list) or not data


@dataclass(frozen=True)
class NetworkFailure:
    reason: str


@dataclass(frozen=True)
class TimeoutFailure:
    timeout: float


@dataclass(frozen=True)
class NonStructuredResponse:
    status: int


@dataclass(frozen=True)
class RemoteError:
    status: int
    message: str


@dataclass(frozen=True)
class FetchAborted:
    pass


FetchFailure = NetworkFailure | TimeoutFailure | NonStructuredResponse | RemoteError
FetchResult = FetchOk | FetchFailure | FetchAborted
