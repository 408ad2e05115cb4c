"""Application services for the error layer."""

from faultline.application.services.categorizer import (
    categorize,
    severity_for_status,
    severity_of,
)
from faultline.application.services.error_pipeline import ErrorPipeline
from faultline.application.services.recovery import retry, with_fallback, with_timeout
from faultline.application.services.sanitizer import ErrorSanitizer

__all__ = [
    "ErrorPipeline",
    "ErrorSanitizer",
    "categorize",
    "retry",
    "severity_for_status",
    "severity_of",
    "with_fallback",
    "with_timeout",
]
