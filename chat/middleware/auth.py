import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError


logger = logging.getLogger(__name__)


def extract_token(scope):
    """
    Access token from the ``token`` query parameter, falling back to an
    ``Authorization: Bearer`` handshake header.
    """
    params = parse_qs(scope.get("query_string", b"").decode())
    if params.get("token"):
        return params["token"][0]

    for name, value in scope.get("headers", []):
        if name == b"authorization":
            parts = value.decode().split()
            if len(parts) == 2 and parts[0].lower() == "bearer":
                return parts[1]
    return None


class HandshakeAuthMiddleware:
    """
    Resolves ``scope["user"]`` from a JWT access token sent with the
    websocket handshake. Runs inside AuthMiddlewareStack, so a session
    user is kept as is. Unknown, expired or deactivated tokens leave the
    connection anonymous and the consumer closes it.
    """

    def __init__(self, inner):
        self.inner = inner

    async def __call__(self, scope, receive, send):
        if "user" in scope and not isinstance(scope["user"], AnonymousUser):
            return await self.inner(scope, receive, send)

        scope["user"] = scope.get("user") or AnonymousUser()
        token = extract_token(scope)
        if token:
            user = await self.get_user_from_token(token)
            if user is not None:
                scope["user"] = user
                logger.debug(f"Authenticated user {user.id} via websocket JWT")
            else:
                logger.debug("Rejected websocket JWT")

        return await self.inner(scope, receive, send)

    @database_sync_to_async
    def get_user_from_token(self, token):
        jwt_auth = JWTAuthentication()
        try:
            validated_token = jwt_auth.get_validated_token(token)
            user = jwt_auth.get_user(validated_token)
        except (InvalidToken, TokenError, AuthenticationFailed):
            return None
        return user if user.is_active else None
