"""
Health Check Endpoints

Liveness and readiness probes for the process supervisor / orchestrator.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse


logger = logging.getLogger(__name__)


def health_live(request):
    """Liveness probe: 200 while the Django process can serve requests."""
    return JsonResponse({"status": "ok"}, status=200)


def health_ready(request):
    """
    Readiness probe.

    Checks the database, the cache and the channel layer used for realtime
    order notifications. Returns 503 when any of them is unreachable.
    """
    checks = {"database": check_database(), "cache": check_cache(), "channel_layer": check_channel_layer()}

    all_ok = all(checks.values())
    status_code = 200 if all_ok else 503

    return JsonResponse({"status": "ready" if all_ok else "not_ready", "checks": checks}, status=status_code)


def check_database():
    try:
        connection.ensure_connection()
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


def check_cache():
    try:
        cache.set("health_check", "ok", timeout=1)
        return cache.get("health_check") == "ok"
    except Exception as e:
        logger.error(f"Cache health check failed: {e}")
        return False


def check_channel_layer():
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return False
    try:
        channel_name = async_to_sync(channel_layer.new_channel)()
        async_to_sync(channel_layer.send)(channel_name, {"type": "health.check"})
        async_to_sync(channel_layer.receive)(channel_name)
        return True
    except Exception as e:
        logger.error(f"Channel layer health check failed: {e}")
        return False
