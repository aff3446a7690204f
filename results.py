"""Result and BookingError: the return contract of catalog and ledger operations.

Expected business-rule violations are returned as a failed ``Result`` rather
than raised, so the calling layer decides how to present them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    INVALID_INTERVAL = "invalid_interval"
    PAST_BOOKING = "past_booking"
    OUTSIDE_BUSINESS_HOURS = "outside_business_hours"
    RESOURCE_NOT_FOUND = "resource_not_found"
    OVERLAP_CONFLICT = "overlap_conflict"
    NOT_FOUND = "not_found"
    NOT_OWNER = "not_owner"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class BookingError:
    """Structured error payload within a Result."""

    code: ErrorCode
    message: str
    detail: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a catalog or ledger operation.

    Attributes:
        ok: Whether the operation succeeded.
        value: Operation-specific payload on success (may be None).
        error: Structured error if ``ok`` is False.
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[BookingError] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> Result[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, code: ErrorCode, message: str, **detail: Any) -> Result[T]:
        return cls(ok=False, error=BookingError(code=code, message=message, detail=detail))

    def unwrap(self) -> T:
        """Return the value of a successful result.

        Calling this on a failure is a programming error.
        """
        if not self.ok:
            assert self.error is not None
            raise ValueError(f"unwrap() on failed result: {self.error.code.value}: {self.error.message}")
        return self.value  # type: ignore[return-value]
