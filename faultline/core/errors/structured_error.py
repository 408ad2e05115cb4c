"""Base exception for every error in the taxonomy.

StructuredError is raised at failure sites (or synthesized by the normalizer
from foreign exceptions) and consumed once by the response renderer.

Invariants:
- ``status_code`` always equals ``error_code.status_code``.
- ``status_code``, ``error_code``, ``timestamp`` and ``is_operational`` are
  read-only properties.
- ``context`` is never mutated; ``with_context()`` returns a new instance.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, ClassVar, Self

from faultline.core.enums import ErrorKind
from faultline.core.errors.error_context import ErrorContext


class StructuredError(Exception):
    """Exception carrying a kind, status code, context and timestamp.

    Subclasses (one per family) pin ``default_kind``, ``allowed_kinds`` and
    ``operational``. The status code is always derived from the kind and
    cannot be passed in.

    Args:
        message: Human-readable message.
        kind: Sub-kind within the family. Defaults to ``default_kind``.
        context: Diagnostic context (ErrorContext or loose mapping).

    Raises:
        ValueError: If ``kind`` does not belong to this family.
    """

    default_kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL_SERVER_ERROR
    allowed_kinds: ClassVar[frozenset[ErrorKind]] = frozenset(ErrorKind)
    operational: ClassVar[bool] = True

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        *,
        context: ErrorContext | Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        kind = kind or self.default_kind
        if kind not in self.allowed_kinds:
            raise ValueError(f"{type(self).__name__} does not accept kind {kind.value}")
        self._message = message
        self._kind = kind
        self._context = ErrorContext.coerce(context)
        self._timestamp = datetime.now(UTC)

    @property
    def message(self) -> str:
        return self._message

    @property
    def error_code(self) -> ErrorKind:
        return self._kind

    @property
    def status_code(self) -> int:
        return self._kind.status_code

    @property
    def is_operational(self) -> bool:
        return self.operational

    @property
    def context(self) -> ErrorContext:
        return self._context

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    @property
    def type_name(self) -> str:
        """Concrete family name rendered as the wire ``type``."""
        return type(self).__name__

    @property
    def stack(self) -> str | None:
        """Formatted traceback, once the error has been raised."""
        if self.__traceback__ is None:
            return None
        return "".join(traceback.format_exception(self))

    def with_context(
        self,
        context: ErrorContext | Mapping[str, Any] | None,
        *,
        overwrite: bool = False,
    ) -> Self:
        """Return a copy enriched with ``context``.

        Message, kind, timestamp and traceback are preserved. The original
        instance is left untouched.

        Args:
            context: Context to merge in.
            overwrite: Replace keys already present in this error's context.

        Returns:
            A new error of the same class.
        """
        clone = type(self).__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone.args = self.args
        clone.__cause__ = self.__cause__
        clone.__context__ = self.__context__
        clone.__suppress_context__ = self.__suppress_context__
        clone.__traceback__ = self.__traceback__
        clone._context = self._context.merge(context, overwrite=overwrite)
        return clone

    def to_dict(self) -> dict[str, Any]:
        """Internal, unsanitized representation for logs and audit records."""
        return {
            "name": self.type_name,
            "message": self.message,
            "status_code": self.status_code,
            "error_code": self.error_code.value,
            "is_operational": self.is_operational,
            "context": self.context.to_dict(),
            "timestamp": self.timestamp.isoformat(),
            "stack": self.stack,
        }

    def __str__(self) -> str:
        return self._message

    def __repr__(self) -> str:
        return f"{self.type_name}(kind={self._kind.value}, message={self._message!r})"
