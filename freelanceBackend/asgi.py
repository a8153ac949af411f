"""
ASGI config for freelanceBackend project.

HTTP requests go to Django; websocket connections are authenticated from the
JWT in the query string, throttled per client IP and routed to the order
room consumer.
"""

import os

import django
from channels.auth import AuthMiddlewareStack
from channels.routing import ProtocolTypeRouter, URLRouter
from channels.security.websocket import AllowedHostsOriginValidator
from django.core.asgi import get_asgi_application


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "freelanceBackend.settings")

# Initialize Django ASGI application early to ensure the AppRegistry
# is populated before importing code that may import ORM models.
django.setup()

django_asgi_app = get_asgi_application()

import chat.api.routing  # noqa: E402
from chat.middleware.auth import HandshakeAuthMiddleware  # noqa: E402
from chat.middleware.throttle import ChannelThrottlingMiddleware  # noqa: E402


application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": ChannelThrottlingMiddleware(
            AllowedHostsOriginValidator(
                AuthMiddlewareStack(HandshakeAuthMiddleware(URLRouter(chat.api.routing.websocket_urlpatterns)))
            )
        ),
    }
)
