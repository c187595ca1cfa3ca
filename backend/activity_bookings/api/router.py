"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from activity_bookings.api.routes import activities, auth, bookings, users

api_router = APIRouter()
api_router.include_router(users.router)
api_router.include_router(auth.router)
api_router.include_router(activities.router)
api_router.include_router(bookings.router)
