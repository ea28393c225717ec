"""
Security guards for role-based access control.

Provides dependencies for protecting endpoints.
"""

from typing import List
from fastapi import Depends
from triplog.app.models.enums import UserRole, ADMIN_ROLES
from triplog.app.core.dependencies import get_current_user
from triplog.app.core.exceptions import AuthorizationError


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/admin/trips")
        async def list_trips(current_user: dict = Depends(require_role([UserRole.ADMIN]))):
            ...

    Args:
        allowed_roles: List of UserRole enums that are allowed to access the endpoint

    Returns:
        FastAPI dependency function that validates user role

    Raises:
        AuthorizationError if user role is not in allowed_roles
    """
    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        try:
            user_role = UserRole(current_user.get("role"))
        except ValueError:
            raise AuthorizationError("Invalid role in token")

        if user_role not in allowed_roles:
            raise AuthorizationError(
                f"Access denied. Required role: {', '.join([r.value for r in allowed_roles])}",
                details={"role": user_role.value}
            )

        return current_user

    return role_checker


require_driver = require_role([UserRole.DRIVER])
require_admin = require_role(list(ADMIN_ROLES))
