"""Core shared kernel.

Foundational pieces used across all layers:
- Error taxonomy (ErrorKind, StructuredError and its families)
- Structured error context and its builder
- Result types for collaborator ports
- Settings

The core module has NO dependencies on other layers.
"""

from faultline.core.enums import ErrorCategory, ErrorKind, ErrorSeverity
from faultline.core.errors import ErrorContext, ErrorContextBuilder, StructuredError
from faultline.core.result import Failure, Result, Success

__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ErrorContextBuilder",
    "ErrorKind",
    "ErrorSeverity",
    "Failure",
    "Result",
    "StructuredError",
    "Success",
]
