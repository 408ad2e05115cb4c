"""Success response format."""

from faultline.presentation.responses.api_response import (
    ApiResponse,
    Pagination,
    ResponseMeta,
    SuccessResponse,
)

__all__ = ["ApiResponse", "Pagination", "ResponseMeta", "SuccessResponse"]
