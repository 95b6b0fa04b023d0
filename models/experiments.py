from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from models.dates import as_utc
from models.enums import ExperimentStatus

# --- Pydantic Models for Requests/Responses ---

class VariantConfig(BaseModel):
    """Defines a variant and its traffic weight."""
    name: str = Field(..., min_length=1, description="The unique name of the variant (e.g., 'A').")
    traffic_split: float = Field(..., ge=0, le=100, description="Traffic percentage (e.g., 50.0).")

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class ExperimentCreate(BaseModel):
    """Schema for creating a new experiment via POST /experiments.

    Variants may be plain names (``["A", "B"]``) or full ``{"name", "trafficSplit"}``
    objects. Plain names split evenly whatever traffic the objects leave over.
    """
    name: str = Field(..., min_length=1)
    description: str | None = None
    variants: list[VariantConfig | str]
    status: ExperimentStatus = ExperimentStatus.DRAFT
    start_date: datetime | None = None
    end_date: datetime | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("variants")
    @classmethod
    def normalize_variants(cls, variants: list[VariantConfig | str]) -> list[VariantConfig]:
        if not variants:
            return []
        # Variants given by name share whatever traffic the explicit splits leave over
        named = [v for v in variants if isinstance(v, str)]
        explicit_total = sum(v.traffic_split for v in variants if not isinstance(v, str))
        even_split = round(max(100 - explicit_total, 0) / len(named), 2) if named else 0
        normalized = [
            VariantConfig(name=v, traffic_split=even_split) if isinstance(v, str) else v
            for v in variants
        ]
        names = [v.name for v in normalized]
        if any(not name for name in names):
            raise ValueError("Variant names must not be empty.")
        if len(set(names)) != len(names):
            raise ValueError("Variant names must be unique.")
        return normalized

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_in_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

class ExperimentUpdate(BaseModel):
    """Schema for PATCH /experiments/{id}. Only the status can change."""
    status: ExperimentStatus | None = None

class ExperimentResponse(BaseModel):
    """Schema returned for a single experiment."""
    id: str
    tenant_id: str
    name: str
    description: str | None = None
    variants: list[VariantConfig]
    status: ExperimentStatus
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

class ExperimentCounts(BaseModel):
    events: int
    user_assignments: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class ExperimentDetailResponse(ExperimentResponse):
    """Schema returned by GET /experiments/{id}, with related row counts."""
    counts: ExperimentCounts
