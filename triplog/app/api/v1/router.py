"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from triplog.app.api.v1.endpoints import (
    auth, driver_trips, admin_trips, reports, notifications
)

router = APIRouter()

# Authentication
router.include_router(auth.router)

# Driver trip lifecycle
router.include_router(driver_trips.router)

# Admin review and reporting
router.include_router(admin_trips.router)
router.include_router(reports.router)

# In-app notifications
router.include_router(notifications.router)
