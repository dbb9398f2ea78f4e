"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import (
    auth, users, reference,
    expense_reports,
    candidates,
    daily_reports, operational
)

router = APIRouter()

# Authentication and user management
router.include_router(auth.router)
router.include_router(users.router)

# Reference data
router.include_router(reference.locations_router)
router.include_router(reference.departments_router)

# Expense reports
router.include_router(expense_reports.router)

# Recruitment
router.include_router(candidates.router)

# Daily operations
router.include_router(daily_reports.router)
router.include_router(operational.router)
