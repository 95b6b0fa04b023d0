from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from models.dates import as_utc

class AnalyticsQuery(BaseModel):
    """Filters accepted by GET /analytics/summary."""
    start_date: datetime | None = None
    end_date: datetime | None = None
    experiment_id: str | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_in_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    # An empty query parameter means "no filter"
    @field_validator("start_date", "end_date", "experiment_id", mode="before")
    @classmethod
    def blank_as_none(cls, value):
        return value or None

class VariantMetrics(BaseModel):
    """Finalized statistics for a single variant."""
    events: int
    users: int
    conversions: int
    # conversions per distinct user, not capped at 1
    conversion_rate: float

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True

class AnalyticsSummary(BaseModel):
    """Schema returned by GET /analytics/summary."""
    total_events: int
    unique_users: int
    # Key is the variant label (e.g., 'A')
    variants: dict[str, VariantMetrics]

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True
