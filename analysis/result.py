"""
Explicit success/failure container for operations that can come back empty.

Callers check `is_ok` instead of receiving placeholder numbers that look
like live data.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar


T = TypeVar('T')


class ErrorKind(str, Enum):
    """Why an operation produced no value."""
    INSUFFICIENT_DATA = 'insufficient_data'
    FETCH_FAILED = 'fetch_failed'
    EMPTY_RESPONSE = 'empty_response'
    INVALID_INPUT = 'invalid_input'


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or an error kind with a message."""
    value: Optional[T] = None
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> 'Result[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, error_kind: ErrorKind, message: str) -> 'Result[T]':
        return cls(error_kind=error_kind, error_message=message)

    @property
    def is_ok(self) -> bool:
        return self.error_kind is None

    def unwrap(self) -> T:
        """Return the value or raise ValueError describing the failure."""
        if not self.is_ok:
            raise ValueError(f"{self.error_kind.value}: {self.error_message}")
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': 'completed' if self.is_ok else 'failed',
            'error_kind': self.error_kind.value if self.error_kind else None,
            'error_message': self.error_message,
        }
