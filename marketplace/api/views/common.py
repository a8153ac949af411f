from rest_framework import status
from rest_framework.response import Response

from marketplace.services import ServiceResult, http_status_for


def error_response(result: ServiceResult) -> Response:
    """Translate a failed ServiceResult into ``{"error", "detail"}`` with its HTTP status."""
    return Response(result.to_dict(), status=http_status_for(result.error))


def validation_error_response(errors) -> Response:
    return Response(
        {"error": "validation_error", "detail": "Invalid request data", "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def int_param(request, name: str, default: int, maximum: int = 100) -> int:
    """Positive integer query param; malformed values fall back to ``default``."""
    try:
        value = int(request.query_params.get(name, default))
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    return min(value, maximum)
