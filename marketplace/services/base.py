"""
Base classes and utilities for the service layer.

Services return a ServiceResult instead of raising for expected failures
(missing rows, permission problems, illegal transitions). Views translate
``result.error`` into an HTTP status through ``ERROR_STATUS``.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code from ErrorCodes (present if ok=False)
        error_detail: Human-readable error message (present if ok=False)

    Examples:
        >>> result = order_service.get_order(user, order_id)
        >>> if result.ok:
        ...     return Response(OrderSerializer(result.value).data)
        >>> return error_response(result)
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None

    def to_dict(self) -> dict:
        """Error body used by the API: ``{"error": code, "detail": message}``."""
        if self.ok:
            return {"success": True, "data": self.value}
        return {"error": self.error, "detail": self.error_detail}


def service_ok(value: T) -> ServiceResult[T]:
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "order_not_found", "invalid_transition")
        error_detail: Human-readable error message
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class OrderService(BaseService):
            def __init__(self, storage, notifier):
                super().__init__()
                self.storage = storage

            @BaseService.log_performance
            def list_orders(self, user):
                self.logger.info(f"Listing orders for {user.id}")
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log duration and outcome of service methods.

        Failed ServiceResults are logged as warnings; exceptions are logged
        with traceback and re-raised.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000

                if isinstance(result, ServiceResult) and not result.ok:
                    self.logger.warning(f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms")
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper


class ErrorCodes:
    """Standard error codes used across marketplace services."""

    # Not found
    ORDER_NOT_FOUND = "order_not_found"
    GIG_NOT_FOUND = "gig_not_found"
    REVIEW_NOT_FOUND = "review_not_found"
    USER_NOT_FOUND = "user_not_found"

    # Forbidden
    PERMISSION_DENIED = "permission_denied"
    NOT_ORDER_PARTICIPANT = "not_order_participant"
    NOT_GIG_OWNER = "not_gig_owner"
    NOT_REVIEW_AUTHOR = "not_review_author"

    # Invalid transition
    INVALID_TRANSITION = "invalid_transition"
    NO_REVISIONS_LEFT = "no_revisions_left"
    ORDER_NOT_COMPLETED = "order_not_completed"

    # Validation
    VALIDATION_ERROR = "validation_error"
    PLAN_NOT_FOUND = "plan_not_found"

    # Conflict
    DUPLICATE_REVIEW = "duplicate_review"

    # Dependency failure
    STORAGE_ERROR = "storage_error"
    INTERNAL_ERROR = "internal_error"


ERROR_STATUS = {
    ErrorCodes.ORDER_NOT_FOUND: 404,
    ErrorCodes.GIG_NOT_FOUND: 404,
    ErrorCodes.REVIEW_NOT_FOUND: 404,
    ErrorCodes.USER_NOT_FOUND: 404,
    ErrorCodes.PERMISSION_DENIED: 403,
    ErrorCodes.NOT_ORDER_PARTICIPANT: 403,
    ErrorCodes.NOT_GIG_OWNER: 403,
    ErrorCodes.NOT_REVIEW_AUTHOR: 403,
    ErrorCodes.INVALID_TRANSITION: 400,
    ErrorCodes.NO_REVISIONS_LEFT: 400,
    ErrorCodes.ORDER_NOT_COMPLETED: 400,
    ErrorCodes.VALIDATION_ERROR: 400,
    ErrorCodes.PLAN_NOT_FOUND: 400,
    ErrorCodes.DUPLICATE_REVIEW: 409,
    ErrorCodes.STORAGE_ERROR: 502,
    ErrorCodes.INTERNAL_ERROR: 500,
}


def http_status_for(error_code: Optional[str]) -> int:
    return ERROR_STATUS.get(error_code, 500)
