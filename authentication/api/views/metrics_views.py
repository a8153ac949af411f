"""
Prometheus Metrics Endpoint

Order lifecycle, review and messaging counters in Prometheus exposition
format. No authentication: restrict access at the network level.
"""

from django.http import HttpResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest


def metrics(request):
    # Import so the marketplace and chat collectors are registered before the first scrape
    import chat.infra.metrics  # noqa: F401
    import marketplace.infra.observability.metrics  # noqa: F401

    return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
