"""
User management module.

Usage:
    from app.features.users import User, UserRepository, UserService

Models:
- User: Coach or athlete account

Repositories:
- UserRepository: Data access for users
"""

from .models import User
from .schemas import UserSummary, UserResponse, ProfileUpdate, PublicProfile
from .repository import UserRepository
from .service import UserService

__all__ = [
    # Models
    "User",
    # Schemas
    "UserSummary",
    "UserResponse",
    "ProfileUpdate",
    "PublicProfile",
    # Repositories
    "UserRepository",
    # Services
    "UserService",
]
