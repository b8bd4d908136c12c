"""Value objects exchanged with photo library implementations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class AuthorizationStatus(Enum):
    """Whether the library currently accepts writes."""

    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"


@dataclass(frozen=True)
class WriteResult:
    """Single completion event delivered once a write finishes."""

    success: bool
    identifier: str | None = None
    error: str | None = None

    @classmethod
    def succeeded(cls, identifier: str) -> WriteResult:
        return cls(True, identifier, None)

    @classmethod
    def failed(cls, error: str) -> WriteResult:
        return cls(False, None, error)


AuthorizationCallback = Callable[[AuthorizationStatus], None]
WriteCompletion = Callable[[WriteResult], None]


__all__ = [
    "AuthorizationCallback",
    "AuthorizationStatus",
    "WriteCompletion",
    "WriteResult",
]
