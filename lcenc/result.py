"""Success/Failure outcome values for callers that run the codec in the background."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from .errors import AuthenticationOrCorruptionError, FormatError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    payload: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.payload


@dataclass(frozen=True)
class Failure:
    error: BaseException

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Union[Success[T], Failure]


def run_operation(operation: Callable[..., T], *args: Any, **kwargs: Any) -> "Result[T]":
    """Run ``operation`` and capture its return value or exception as a Result."""
    try:
        return Success(operation(*args, **kwargs))
    except Exception as exc:
        return Failure(exc)


def describe_failure(error: BaseException) -> str:
    if isinstance(error, AuthenticationOrCorruptionError):
        return "Processing failed: wrong password or corrupted file."
    if isinstance(error, FormatError):
        return "Processing failed: invalid file format."
    return f"Processing failed: {error}"


__all__ = ["Success", "Failure", "Result", "run_operation", "describe_failure"]
