"""
Coach/athlete access policy.

Usage:
    from app.features.access import AccessPolicy

    policy = AccessPolicy(db)
    await policy.ensure_can_act_on(user, activity.user_id)
"""

from .policy import AccessPolicy, owns_resource

__all__ = ["AccessPolicy", "owns_resource"]
