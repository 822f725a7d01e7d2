"""Common Pydantic schemas used across the API.

This module provides shared schemas for:
- Error responses (consistent error format)
- Health checks
- Simple message responses
"""

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Base Configuration
# =============================================================================


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorDetail(BaseModel):
    """Details of an error response.

    Attributes:
        code: Machine-readable error code (e.g., "HTTP_ERROR")
        message: Human-readable error description
        request_id: Correlation ID for tracing (optional)
        details: Additional error context (optional)
    """

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    request_id: str | None = Field(
        None, description="Request correlation ID for tracing"
    )
    details: dict[str, str | int | bool | None] | None = Field(
        None, description="Additional error context"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": "HTTP_ERROR",
                "message": "HTTP error 404 for /movie/0",
                "request_id": "abc-123-def-456",
                "details": {"status": 404, "endpoint": "/movie/0"},
            }
        }
    )


class ErrorResponse(BaseModel):
    """Standard error response wrapper."""

    error: ErrorDetail


# =============================================================================
# Health Check Schemas
# =============================================================================


class HealthCheckResponse(BaseModel):
    """Health check endpoint response.

    Attributes:
        status: Overall health status
        checks: Individual component checks
    """

    status: str = Field(..., pattern="^(ok|degraded|error)$")
    checks: dict[str, str | int] = Field(
        default_factory=dict, description="Individual component checks"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "ok",
                "checks": {"tmdb_credential": "ok", "cache_entries": 12},
            }
        }
    )


# =============================================================================
# Message Response Schemas
# =============================================================================


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str = Field(..., description="Response message")

    model_config = ConfigDict(
        json_schema_extra={"example": {"message": "Cache cleared"}}
    )
