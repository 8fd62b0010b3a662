"""
Railway-oriented result types.
Checks that report rather than raise return Success or Failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

T = TypeVar('T')
E = TypeVar('E')


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful check result."""
    value: T
    metadata: dict[str, Any] | None = None
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            object.__setattr__(self, 'timestamp', datetime.now())

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Failed check result."""
    error: E
    context: dict[str, Any] | None = None
    recoverable: bool = False
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            object.__setattr__(self, 'timestamp', datetime.now())

    @property
    def ok(self) -> bool:
        return False


# Type alias for Railway Result
Result = Success[T] | Failure[E]
