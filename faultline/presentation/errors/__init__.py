"""Error wire format, renderer and FastAPI exception handlers.

Exports:
    ErrorBody: The ``error`` object of the wire format
    ErrorResponse: Error envelope
    ErrorResponseBuilder: StructuredError -> RenderedError
    RenderedError: Status code, body and headers
    register_exception_handlers: Register global exception handlers
"""

from faultline.presentation.errors.error_response import ErrorBody, ErrorResponse
from faultline.presentation.errors.error_response_builder import (
    HARDENING_HEADERS,
    ErrorResponseBuilder,
    RenderedError,
    to_json_response,
)
from faultline.presentation.errors.exception_handlers import (
    register_exception_handlers,
    request_context_from,
)

__all__ = [
    "HARDENING_HEADERS",
    "ErrorBody",
    "ErrorResponse",
    "ErrorResponseBuilder",
    "RenderedError",
    "register_exception_handlers",
    "request_context_from",
    "to_json_response",
]
