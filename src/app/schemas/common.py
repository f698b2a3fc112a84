"""Response envelope shared by every API endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Uniform body for success and failure responses."""

    success: bool = Field(..., description="Whether the operation succeeded")
    data: Any = Field(default=None, description="Operation payload")
    error: str | None = Field(default=None, description="Error kind on failure")
    message: str | None = Field(default=None, description="Human-readable detail")


def ok(data: Any = None, message: str | None = None) -> ApiResponse:
    """Success envelope."""
    return ApiResponse(success=True, data=data, message=message)


def failure(error: str, message: str | None = None) -> dict[str, Any]:
    """Failure envelope as a plain dict for JSONResponse."""
    return ApiResponse(success=False, error=error, message=message).model_dump()
