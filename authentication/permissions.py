"""
Role based DRF permissions.

The role is re-read from the database rather than trusted from the JWT
claim, so a role change takes effect before the token expires.
"""

from __future__ import annotations

from typing import Iterable

from django.contrib.auth import get_user_model
from rest_framework.permissions import BasePermission


UserModel = get_user_model()


def _fetch_persisted_role(user: UserModel) -> str | None:
    cached = getattr(user, "_persisted_role", None)
    if cached is not None:
        return cached
    role = user.__class__.objects.filter(pk=user.pk).values_list("role", flat=True).first()
    setattr(user, "_persisted_role", role)
    return role


def user_has_role(user: UserModel, *allowed: str) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    return _fetch_persisted_role(user) in allowed


class RoleRequired(BasePermission):
    """Allow authenticated users whose persisted role is in ``allowed_roles``."""

    allowed_roles: Iterable[str] = ()
    message = "Access denied. Insufficient role."

    def has_permission(self, request, view) -> bool:
        return user_has_role(request.user, *self.allowed_roles)


class IsClient(RoleRequired):
    allowed_roles = ("client",)
    message = "Only clients can perform this action."


class IsFreelancer(RoleRequired):
    allowed_roles = ("freelancer",)
    message = "Only freelancers can perform this action."
