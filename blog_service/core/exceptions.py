"""Custom exception classes for the application.

Two families matter to callers:

- Client input errors (4xx): malformed filter values, malformed cursors,
  unsupported sort options. Never retried automatically.
- Infrastructure errors (5xx): the store is unreachable or a query failed.
  Listings are read-only and idempotent, so these are safe to retry.
"""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            status_code=404,
            detail="Resource not found",
            type="resource-not-found",
            title="Resource Not Found",
            extra={"resource_id": "abc123", "resource_type": "post"}
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code."""
        titles = {
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            404: "Not Found",
            409: "Conflict",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
            503: "Service Unavailable",
        }
        return titles.get(status_code, "Error")


class NotFoundException(AppException):
    """Exception raised when a resource is not found.

    Example:
        raise NotFoundException(
            detail="Post abc123 not found",
            type="post-not-found",
            extra={"post_id": "abc123"}
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "not-found",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=404,
            detail=detail,
            type=type,
            title="Not Found",
            instance=instance,
            extra=extra,
        )


class UnauthorizedException(AppException):
    """Exception raised when the caller identity is missing or unusable."""

    def __init__(
        self,
        detail: str = "Authentication credentials required",
        type: str = "unauthorized",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=401,
            detail=detail,
            type=type,
            title="Unauthorized",
            instance=instance,
            extra=extra,
        )


class ConflictException(AppException):
    """Exception raised for resource conflicts.

    Example:
        raise ConflictException(
            detail="Category 'news' already exists",
            extra={"field": "name", "value": "news"}
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "conflict",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=409,
            detail=detail,
            type=type,
            title="Conflict",
            instance=instance,
            extra=extra,
        )


class BadRequestException(AppException):
    """Exception raised for malformed client input.

    Example:
        raise BadRequestException(
            detail="Invalid request format",
            type="bad-request",
            extra={"reason": "missing required field"}
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "bad-request",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=400,
            detail=detail,
            type=type,
            title="Bad Request",
            instance=instance,
            extra=extra,
        )


class InvalidCursorException(BadRequestException):
    """Exception raised when a pagination cursor cannot be decoded.

    Every decoding failure surfaces as this single error kind; the
    reason is kept in ``extra`` for diagnostics.

    Example:
        raise InvalidCursorException(reason="id is not a valid UUID")
    """

    def __init__(
        self,
        reason: str,
        instance: str | None = None,
    ) -> None:
        super().__init__(
            detail=f"Invalid cursor: {reason}",
            type="invalid-cursor",
            instance=instance,
            extra={"reason": reason},
        )
        self.reason = reason


class InvalidFilterException(BadRequestException):
    """Exception raised when a listing filter or sort option is unusable.

    Example:
        raise InvalidFilterException(
            field="category_id",
            detail="Invalid category id",
            value="not-a-uuid",
        )
    """

    def __init__(
        self,
        field: str,
        detail: str,
        value: Any = None,
        instance: str | None = None,
    ) -> None:
        extra: dict[str, Any] = {"field": field}
        if value is not None:
            extra["value"] = value
        super().__init__(
            detail=detail,
            type="invalid-filter",
            instance=instance,
            extra=extra,
        )
        self.field = field


class ServiceUnavailableException(AppException):
    """Exception raised when a backing service is temporarily unavailable.

    Example:
        raise ServiceUnavailableException(
            detail="Database is temporarily unavailable",
            extra={"service": "database", "retry_after": 30}
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "service-unavailable",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=503,
            detail=detail,
            type=type,
            title="Service Unavailable",
            instance=instance,
            extra=extra,
        )


class StoreUnavailableException(ServiceUnavailableException):
    """Exception raised when a store read fails or the store is unreachable.

    Reads are idempotent, so callers may retry with backoff.

    Example:
        raise StoreUnavailableException(operation="list_posts")
    """

    def __init__(
        self,
        operation: str,
        detail: str = "The data store is temporarily unavailable",
        instance: str | None = None,
    ) -> None:
        super().__init__(
            detail=detail,
            type="store-unavailable",
            instance=instance,
            extra={"operation": operation, "retryable": True},
        )
        self.operation = operation
