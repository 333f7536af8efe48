"""Classification contracts."""

from typing import Literal

from pydantic import BaseModel, Field

from .field import FieldDescriptor

TraceStatus = Literal["no-result", "unknown-skipped", "selected", "failed"]


class ClassifyRequest(BaseModel):
    """Classify one field.

    `strategies` reorders (and filters) the pipeline for this request only.
    """

    field: FieldDescriptor
    strategies: list[str] | None = None
    use_async: bool = True


class Prediction(BaseModel):
    """A single strategy opinion."""

    field_type: str
    confidence: float
    method: str


class StrategyTimingModel(BaseModel):
    strategy: str
    duration_ms: float


class TraceEntryModel(BaseModel):
    strategy: str
    status: TraceStatus
    field_type: str | None = None
    confidence: float | None = None


class ClassifyResponse(BaseModel):
    """Auditable outcome of one classification pass."""

    field_type: str
    method: str
    confidence: float
    duration_ms: float
    timings: list[StrategyTimingModel] = Field(default_factory=list)
    decision_trace: list[TraceEntryModel] = Field(default_factory=list)
    predictions: list[Prediction] = Field(default_factory=list)


class SoftMatchRequest(BaseModel):
    signals: str


class SoftMatchResponse(BaseModel):
    match: Prediction | None = None
    model_loaded: bool
