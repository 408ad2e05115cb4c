"""HTTP middleware."""

from faultline.presentation.middleware.request_id_middleware import (
    REQUEST_ID_HEADER,
    RequestIdMiddleware,
    get_request_id,
    request_id_context,
)

__all__ = [
    "REQUEST_ID_HEADER",
    "RequestIdMiddleware",
    "get_request_id",
    "request_id_context",
]
