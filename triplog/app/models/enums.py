"""
User roles enumeration.

Defines the role types for the trip log system.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        DRIVER: Records trips and waypoint evidence (default role)
        ADMIN: Reviews, approves or rejects pending trips
        SUPER_ADMIN: Admin who may also amend audit fields of approved trips
    """
    DRIVER = "driver"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPER_ADMIN)
