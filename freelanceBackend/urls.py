"""
URL configuration for freelanceBackend project.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView

from authentication.api.views import health_views, metrics_views


urlpatterns = [
    path("admin/", admin.site.urls),
    # API Documentation
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    # Observability
    path("api/metrics/", metrics_views.metrics, name="metrics"),
    path("api/health/live/", health_views.health_live, name="health_live"),
    path("api/health/ready/", health_views.health_ready, name="health_ready"),
    # API endpoints
    path("api/auth/", include("authentication.urls")),
    path("api/", include("marketplace.urls")),
    path("api/messages/", include("chat.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
