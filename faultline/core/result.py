"""Result types for collaborator ports.

Ports that talk to external collaborators (the audit sink) report failure as
data instead of raising, so a broken collaborator can never replace the error
being rendered.

Usage:
    result = await audit.record(event_type=..., payload=..., risk_level=...)
    match result:
        case Success():
            pass
        case Failure(error=error):
            logger.warning("Audit record failed", reason=error.message)
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


Result: TypeAlias = Success[T] | Failure[E]
