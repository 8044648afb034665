"""
Centralized HTTP exceptions for consistent error handling.

Domain services raise these directly; FastAPI turns them into responses
because they are HTTPException subclasses.

Usage:
    from shared.utils.exceptions import NotFoundError, ConflictError, ValidationError

    raise NotFoundError("Dish", dish_id)
    raise ConflictError("Cannot delete category with existing dishes")
    raise ValidationError("Category not found", field="category_id")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def __str__(self) -> str:
        return str(self.detail)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Category", "cat_9")
        raise NotFoundError("Inventory for dish", dish_id)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} {entity_id} not found"
        else:
            detail = f"{entity} not found"

        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class InventoryNotFoundError(NotFoundError):
    """No inventory record exists for the dish."""

    def __init__(self, dish_id: str, **log_context: Any):
        super().__init__("Inventory for dish", dish_id, **log_context)


class PromotionNotFoundError(NotFoundError):
    """Promotion id is in neither the active nor the completed list."""

    def __init__(self, promotion_id: str, **log_context: Any):
        super().__init__("Promotion", promotion_id, **log_context)


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Price must be greater than 0", field="price")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class UnsupportedReportTypeError(ValidationError):
    """Report type has no generator."""

    def __init__(self, report_type: str, **log_context: Any):
        self.report_type = report_type
        super().__init__(
            f"Unsupported report type: {report_type}",
            report_type=report_type,
            **log_context,
        )


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Business invariant violation (409).

    Usage:
        raise ConflictError("Cannot delete category with existing dishes")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to generate report", report_type="sales")
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class StoreError(InternalError):
    """Entity store read/write failed. Fatal for the request, never retried."""

    def __init__(self, operation: str, collection: str, **log_context: Any):
        self.operation = operation
        self.collection = collection
        detail = f"Failed to {operation} {collection}.json"
        super().__init__(detail, operation=operation, collection=collection, **log_context)
