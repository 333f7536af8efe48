"""Persisted field rule, as consumed by the learning store."""

from pydantic import BaseModel, Field

from .dataset import now_ms


class FieldRule(BaseModel):
    """User-defined rule binding a selector on matching pages to a field type."""

    id: str
    url_pattern: str = "*"
    field_selector: str
    field_name: str | None = None
    field_type: str
    fixed_value: str | None = None
    generator: str = "auto"
    priority: int = 0
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)
