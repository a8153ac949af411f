"""
Marketplace Service Layer

Shared result type, error codes and the ``BaseService`` used by the domain
services of the catalog, ordering and reviews sub-apps.

Services:
- CatalogService (marketplace.catalog.domain.services): gig CRUD and browsing
- OrderService (marketplace.ordering.domain.services): order lifecycle
- ReviewService, RatingService (marketplace.reviews.domain.services): reviews and seller ratings

Usage:
    from infrastructure.container import container

    result = container.order_service().get_order(user, order_id)
    if result.ok:
        order = result.value
    else:
        status = http_status_for(result.error)
"""

from .base import ERROR_STATUS, BaseService, ErrorCodes, ServiceResult, http_status_for, service_err, service_ok

__all__ = [
    "BaseService",
    "ServiceResult",
    "service_ok",
    "service_err",
    "ErrorCodes",
    "ERROR_STATUS",
    "http_status_for",
]
