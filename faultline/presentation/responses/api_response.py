"""Success response format.

Companion of the error envelope so clients can branch on ``success``:

    {
      "success": true,
      "data": {...},
      "meta": {
        "timestamp": "2024-01-15T10:30:00Z",
        "requestId": "550e8400-e29b-41d4-a716-446655440000",
        "pagination": {"page": 2, "limit": 20, "total": 45, "totalPages": 3,
                       "hasNext": true, "hasPrev": true}
      }
    }

Usage:
    @router.get("/users/{user_id}")
    async def get_user(user_id: str) -> JSONResponse:
        return ApiResponse.success(await users.get(user_id))

    @router.get("/users")
    async def list_users(page: int = 1, limit: int = 20) -> JSONResponse:
        items, total = await users.page(page, limit)
        return ApiResponse.paginated(items, page=page, limit=limit, total=total)
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from faultline.presentation.middleware.request_id_middleware import get_request_id


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int = Field(..., ge=1, description="Current page number (1-indexed)")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total items available")
    total_pages: int = Field(..., alias="totalPages", description="Total pages")
    has_next: bool = Field(..., alias="hasNext", description="A next page exists")
    has_prev: bool = Field(..., alias="hasPrev", description="A previous page exists")

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> Pagination:
        total_pages = math.ceil(total / limit) if total else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class ResponseMeta(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    request_id: str | None = Field(None, alias="requestId")
    pagination: Pagination | None = None


class SuccessResponse(BaseModel):
    """Success envelope."""

    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    data: Any = None
    meta: ResponseMeta = Field(default_factory=ResponseMeta)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ApiResponse:
    """Factory for success responses."""

    @staticmethod
    def _meta(
        request_id: str | None, pagination: Pagination | None = None
    ) -> ResponseMeta:
        return ResponseMeta(
            request_id=request_id or get_request_id(), pagination=pagination
        )

    @staticmethod
    def success(
        data: Any = None,
        *,
        status_code: int = status.HTTP_200_OK,
        request_id: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> JSONResponse:
        body = SuccessResponse(data=data, meta=ApiResponse._meta(request_id))
        return JSONResponse(
            status_code=status_code, content=body.to_wire(), headers=headers
        )

    @staticmethod
    def created(
        data: Any = None,
        *,
        location: str | None = None,
        request_id: str | None = None,
    ) -> JSONResponse:
        """201 response, with a Location header when ``location`` is given."""
        headers = {"Location": location} if location else None
        return ApiResponse.success(
            data,
            status_code=status.HTTP_201_CREATED,
            request_id=request_id,
            headers=headers,
        )

    @staticmethod
    def accepted(data: Any = None, *, request_id: str | None = None) -> JSONResponse:
        return ApiResponse.success(
            data, status_code=status.HTTP_202_ACCEPTED, request_id=request_id
        )

    @staticmethod
    def paginated(
        items: list[Any],
        *,
        page: int,
        limit: int,
        total: int,
        request_id: str | None = None,
    ) -> JSONResponse:
        pagination = Pagination.build(page=page, limit=limit, total=total)
        body = SuccessResponse(
            data=items, meta=ApiResponse._meta(request_id, pagination)
        )
        return JSONResponse(status_code=status.HTTP_200_OK, content=body.to_wire())

    @staticmethod
    def no_content() -> Response:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
