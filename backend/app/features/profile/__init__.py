"""
Extended athlete profile.

Usage:
    from app.features.profile import ProfileService
"""

from .service import ProfileService, karvonen_zones

__all__ = [
    "ProfileService",
    "karvonen_zones",
]
