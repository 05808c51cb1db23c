"""Shared API schemas."""

from blog_service.core.schemas.error import (
    ProblemDetail,
    ValidationError,
    ValidationProblemDetail,
)

__all__ = ["ProblemDetail", "ValidationError", "ValidationProblemDetail"]
