"""
Tagged results for upstream calls.

Every remote step returns ``Ok(value)`` or ``Err(error)``. Callers check the
variant with ``isinstance`` and map the error into their own vocabulary
before handing it further up.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")

@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

Result = Union[Ok[T], Err[E]]

@dataclass(frozen=True)
class RemoteFailure:
    """Why an upstream call did not produce a usable body."""

    reason: str  # network | timeout | status | malformed | staging
    detail: str = ""
    status: Optional[int] = None

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.reason} (HTTP {self.status}): {self.detail}"
        return f"{self.reason}: {self.detail}"
