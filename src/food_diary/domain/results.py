"""Result values returned by the backend gateway."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")

INVALID_RESPONSE_FORMAT = "Invalid response format"


class ErrorKind(str, Enum):
    """Classifies why a backend call failed."""

    CLIENT = "client"
    SERVER = "server"
    TRANSPORT = "transport"
    PARSE = "parse"


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """Outcome of a single backend call: either data or an error message."""

    data: T | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T | None, status_code: int | None = None) -> "ApiResult[T]":
        return cls(data=data, status_code=status_code)

    @classmethod
    def failure(
        cls, error: str, kind: ErrorKind, status_code: int | None = None
    ) -> "ApiResult[T]":
        return cls(error=error, error_kind=kind, status_code=status_code)

    def map(self, convert: Callable[[T], object]) -> "ApiResult":
        """Convert successful data, turning conversion errors into parse failures."""
        if not self.ok or self.data is None:
            return self
        try:
            converted = convert(self.data)
        except (KeyError, TypeError, ValueError):
            return ApiResult.failure(
                INVALID_RESPONSE_FORMAT, ErrorKind.PARSE, self.status_code
            )
        return ApiResult(data=converted, status_code=self.status_code)
