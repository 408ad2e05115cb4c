"""Category and severity derivation.

Both functions are pure and total: they only look at the error's kind and
status code, so two errors with the same kind always classify the same way
regardless of how they were constructed (raised directly, built by a factory,
or synthesized by the normalizer).

Severity by status code:
    >= 500      -> CRITICAL
    429, 403    -> HIGH
    401/409/422 -> MEDIUM
    otherwise   -> LOW
"""

from faultline.core.enums import ErrorCategory, ErrorSeverity
from faultline.core.errors import StructuredError

_HIGH_STATUS = frozenset({403, 429})
_MEDIUM_STATUS = frozenset({401, 409, 422})


def categorize(error: StructuredError) -> ErrorCategory:
    """Return the category of the error's kind."""
    return error.error_code.category


def severity_for_status(status_code: int) -> ErrorSeverity:
    if status_code >= 500:
        return ErrorSeverity.CRITICAL
    if status_code in _HIGH_STATUS:
        return ErrorSeverity.HIGH
    if status_code in _MEDIUM_STATUS:
        return ErrorSeverity.MEDIUM
    return ErrorSeverity.LOW


def severity_of(error: StructuredError) -> ErrorSeverity:
    """Return the severity derived from the error's status code."""
    return severity_for_status(error.status_code)
