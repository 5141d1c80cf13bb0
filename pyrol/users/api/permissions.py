"""Role gates shared by every API module.

A signed-in user whose role is not allowed gets 401 ``{"detail":
"Unauthorized"}`` rather than DRF's usual 403. Anonymous requests fall through
to DRF's own ``NotAuthenticated`` handling, which is also a 401.
"""

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.permissions import SAFE_METHODS
from rest_framework.permissions import BasePermission

from pyrol.users.models import User

ROLE_ADMIN = User.Role.ADMIN
ROLE_DEPARTMENT_HEAD = User.Role.DEPARTMENT_HEAD
ROLE_EMPLOYEE = User.Role.EMPLOYEE


class RoleNotAllowed(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"
    default_code = "unauthorized"


def user_has_role(user, roles) -> bool:
    if not (user and getattr(user, "is_authenticated", False)):
        return False
    return getattr(user, "role", None) in set(roles)


class _RolePermission(BasePermission):
    """Base helper to gate access by role."""

    allowed_roles: tuple[str, ...] = ()

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        if user_has_role(user, self.allowed_roles):
            return True
        raise RoleNotAllowed


class IsAdmin(_RolePermission):
    allowed_roles = (ROLE_ADMIN,)


class IsEmployeeRole(_RolePermission):
    allowed_roles = (ROLE_EMPLOYEE,)


class IsDepartmentHead(_RolePermission):
    allowed_roles = (ROLE_DEPARTMENT_HEAD,)


class IsAdminOrReadOnly(_RolePermission):
    """Reads for any signed-in user, writes for ADMIN."""

    allowed_roles = (ROLE_ADMIN,)

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if request.method in SAFE_METHODS:
            return bool(user and getattr(user, "is_authenticated", False))
        return super().has_permission(request, view)
