"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from app.api.v1.routes import (
    activities,
    athletes,
    auth,
    gear,
    goals,
    invitations,
    messages,
    notifications,
    plans,
    profile,
    strava,
    users,
)

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(profile.router)
api_router.include_router(athletes.router)
api_router.include_router(activities.router)
api_router.include_router(plans.router)
api_router.include_router(goals.router)
api_router.include_router(gear.router)
api_router.include_router(messages.router)
api_router.include_router(invitations.router)
api_router.include_router(notifications.router)
api_router.include_router(strava.router)
