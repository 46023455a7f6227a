"""
Base schema for API payloads.

The web client speaks camelCase; Python code uses snake_case.
"""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .dates import to_naive_utc

# Incoming timestamps are stored as naive UTC
UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


class CamelModel(BaseModel):
    """Accepts both spellings on input, serializes camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class FeedbackRequest(CamelModel):
    """Coach comment on an activity or a planned session."""

    feedback: str = Field(..., min_length=1, max_length=5000)


class MessageResponse(CamelModel):
    """Plain acknowledgement body."""

    message: str
