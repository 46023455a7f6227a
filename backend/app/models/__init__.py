"""
Database Models

Feature models live in their feature packages and share Base from
app.models.base. They are imported lazily here: feature model modules
import app.models.base, so eager imports would be circular.

Call import_all_models() before touching Base.metadata (create_all,
Alembic autogenerate).
"""

from importlib import import_module

from app.models.base import Base

# Model name -> defining module
_MODEL_MODULES = {
    "User": "app.features.users.models",
    "Invitation": "app.features.invitations.models",
    "StravaToken": "app.features.strava.models",
    "Activity": "app.features.activities.models",
    "TrainingPlan": "app.features.plans.models",
    "PlanSession": "app.features.plans.models",
    "PlanTemplate": "app.features.plans.models",
    "TemplateSession": "app.features.plans.models",
    "Message": "app.features.messages.models",
    "Notification": "app.features.notifications.models",
    "Goal": "app.features.goals.models",
    "Gear": "app.features.gear.models",
    "ActivityGear": "app.features.gear.models",
}


def import_all_models() -> None:
    """Register every table with Base.metadata."""
    for module in set(_MODEL_MODULES.values()):
        import_module(module)


def __getattr__(name):
    if name in _MODEL_MODULES:
        return getattr(import_module(_MODEL_MODULES[name]), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["Base", "import_all_models", *_MODEL_MODULES]
