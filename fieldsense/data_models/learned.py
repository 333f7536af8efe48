"""Learned correction domain models."""

from typing import Literal

from pydantic import BaseModel, Field

LearnedSource = Literal["auto", "rule"]


class LearnedEntry(BaseModel):
    """A signal → field type correction fed back into soft matching."""

    # Stored pre-normalized
    signals: str
    field_type: str
    generator_type: str | None = None
    source: LearnedSource = "auto"
    timestamp: int = Field(default=0, description="Milliseconds since epoch")


class RetrainDetail(BaseModel):
    """Audit record for one rule processed by a retrain."""

    rule_id: str
    status: Literal["imported", "skipped"]
    signals: str
    field_type: str
    selector: str


class RetrainResult(BaseModel):
    """Outcome of rebuilding rule-derived learned entries."""

    total_rules: int
    imported: int
    skipped: int
    duration_ms: float
    details: list[RetrainDetail] = Field(default_factory=list)
