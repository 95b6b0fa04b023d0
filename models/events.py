from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any
from datetime import datetime
from models.dates import as_utc
from models.enums import EventType

class EventCreate(BaseModel):
    """Schema for recording a new event via POST /events.

    ``properties.experimentId`` and ``properties.variant`` tie the event to an
    experiment arm; everything else in ``properties`` is stored as-is.
    """
    user_id: str = Field(..., min_length=1)
    event_type: EventType = Field(..., description="PAGE_VIEW, CLICK or CONVERSION.")
    properties: dict[str, Any] | None = Field(default_factory=dict, description="Flexible JSON for extra context.")
    timestamp: datetime | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("timestamp")
    @classmethod
    def timestamp_in_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

class EventResponse(BaseModel):
    """Schema for the response after recording an event."""
    id: str
    tenant_id: str
    user_id: str
    event_type: EventType
    experiment_id: str | None = None
    variant: str | None = None
    properties: dict[str, Any]
    timestamp: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
