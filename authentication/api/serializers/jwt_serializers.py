from rest_framework_simplejwt.tokens import RefreshToken


class CustomRefreshToken(RefreshToken):
    """Refresh token carrying the user's role so clients can route without a profile call."""

    @classmethod
    def for_user(cls, user):
        token = cls()
        token["user_id"] = str(user.id)
        token["role"] = user.role
        token["name"] = user.name
        token["email"] = user.email

        return token
