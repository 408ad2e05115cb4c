"""Core enums package.

Exports all core-level enums for convenient importing.

Usage:
    from faultline.core.enums import ErrorKind, ErrorCategory, ErrorSeverity
"""

from faultline.core.enums.environment import Environment
from faultline.core.enums.error_category import ErrorCategory
from faultline.core.enums.error_kind import ErrorKind
from faultline.core.enums.error_severity import ErrorSeverity

__all__ = ["Environment", "ErrorCategory", "ErrorKind", "ErrorSeverity"]
