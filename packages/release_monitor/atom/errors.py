"""
Fetch Error Taxonomy.

A single exception type tagged with a FetchErrorKind. Callers branch on
``error.kind`` (or ``error.retryable``); classification of a status code or
transport exception is the pure function ``classify``.
"""

import traceback
from typing import Any, Dict, List, Optional, Union

from core.constants import TOO_MANY_REQUESTS
from core.logging import LogSink, log_event
from packages.shared.enums import FetchErrorKind


class FetchError(Exception):
    """Upstream fetch failure tagged with its classification."""

    def __init__(
        self,
        kind: FetchErrorKind,
        status: Optional[int] = None,
        message: Optional[str] = None,
        repo: Optional[str] = None,
    ):
        self.kind = kind
        self.status = status
        self.repo = repo
        if message is None:
            message = kind.value.replace("_", " ")
            if status is not None:
                message = f"{message} {status}"
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        """Only upstream 4xx (other than 429) is permanent."""
        return self.kind is not FetchErrorKind.BAD_REQUEST

    @classmethod
    def from_status(cls, status: int) -> "FetchError":
        kind = classify(status)
        if kind is None:
            raise ValueError(f"status {status} is not an error")
        return cls(kind, status=status)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "FetchError":
        if isinstance(exc, FetchError):
            return exc
        return cls(classify(exc) or FetchErrorKind.UNKNOWN, message=str(exc) or type(exc).__name__)

    def __repr__(self) -> str:
        return f"FetchError(kind={self.kind.value!r}, status={self.status!r}, repo={self.repo!r})"


def classify(status_or_exception: Union[int, BaseException]) -> Optional[FetchErrorKind]:
    """
    Classify an HTTP status or a transport exception.

    Returns None for 200. Timeouts and connection failures are UNKNOWN and
    treated as transient; 429 is a retryable BAD_RESPONSE.
    """
    if isinstance(status_or_exception, FetchError):
        return status_or_exception.kind
    if isinstance(status_or_exception, BaseException):
        return FetchErrorKind.UNKNOWN

    status = status_or_exception
    if status == 200:
        return None
    if status == TOO_MANY_REQUESTS:
        return FetchErrorKind.BAD_RESPONSE
    if 400 <= status < 500:
        return FetchErrorKind.BAD_REQUEST
    return FetchErrorKind.BAD_RESPONSE


class FetchErrorTracker:
    """
    Collects per-repository fetch failures and reports them in aggregate.

    Example:
        tracker = FetchErrorTracker()
        tracker.push("owner/name", error)
        tracker.log("fetchTagsErrors")
        # -> fetchTagsErrorsBadResponse {count}, fetchTagsErrorsBadResponseDetails {errors}
    """

    GROUPS = ("BadResponse", "BadRequest", "Other")

    def __init__(self, sink: LogSink = log_event):
        self._sink = sink
        self._errors: List[FetchError] = []

    @property
    def errors(self) -> List[FetchError]:
        return list(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def push(self, repo: str, error: BaseException) -> None:
        """Record an error, tagging it with the repository it came from."""
        fetch_error = FetchError.from_exception(error)
        if fetch_error is not error:
            fetch_error.__cause__ = error
        fetch_error.repo = repo
        self._errors.append(fetch_error)

    def grouped(self) -> Dict[str, List[Any]]:
        """Group recorded errors by taxonomy."""
        groups: Dict[str, List[Any]] = {name: [] for name in self.GROUPS}
        for error in self._errors:
            if error.kind is FetchErrorKind.BAD_RESPONSE:
                groups["BadResponse"].append([error.repo, error.status])
            elif error.kind is FetchErrorKind.BAD_REQUEST:
                groups["BadRequest"].append([error.repo, error.status])
            else:
                groups["Other"].append([error.repo, _error_details(error)])
        return groups

    def log(self, prefix: str) -> None:
        """Emit one count record and one details record per non-empty group."""
        if not self._errors:
            return
        for name, items in self.grouped().items():
            if not items:
                continue
            self._sink(f"{prefix}{name}", count=len(items))
            self._sink(f"{prefix}{name}Details", errors=items)


def _error_details(error: FetchError) -> str:
    cause = error.__cause__
    if cause is not None and cause.__traceback__ is not None:
        return "".join(traceback.format_exception(type(cause), cause, cause.__traceback__)).strip()
    return f"{error.kind.value}: {error}"
