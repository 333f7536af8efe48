"""Classification result structures."""

from dataclasses import dataclass, field
from typing import Literal

from fieldsense.contracts import (
    ClassifyResponse,
    Prediction,
    StrategyTimingModel,
    TraceEntryModel,
    TraceStatus,
)


@dataclass(frozen=True)
class ClassifierResult:
    """One strategy's opinion. Strategies return None for "no opinion"."""

    field_type: str
    confidence: float
    method: str | None = None  # filled with the strategy name by the pipeline


@dataclass(frozen=True)
class SoftMatch:
    """Soft-match outcome and the tier that produced it."""

    field_type: str
    confidence: float
    tier: Literal["learned", "network"]


@dataclass(frozen=True)
class StrategyTiming:
    strategy: str
    duration_ms: float


@dataclass(frozen=True)
class TraceEntry:
    strategy: str
    status: TraceStatus
    field_type: str | None = None
    confidence: float | None = None


@dataclass
class PipelineResult:
    """Auditable outcome of one classification pass."""

    field_type: str
    method: str
    confidence: float
    duration_ms: float
    timings: list[StrategyTiming] = field(default_factory=list)
    decision_trace: list[TraceEntry] = field(default_factory=list)
    predictions: list[ClassifierResult] = field(default_factory=list)

    def to_response(self) -> ClassifyResponse:
        return ClassifyResponse(
            field_type=self.field_type,
            method=self.method,
            confidence=self.confidence,
            duration_ms=self.duration_ms,
            timings=[
                StrategyTimingModel(strategy=t.strategy, duration_ms=t.duration_ms)
                for t in self.timings
            ],
            decision_trace=[
                TraceEntryModel(
                    strategy=t.strategy,
                    status=t.status,
                    field_type=t.field_type,
                    confidence=t.confidence,
                )
                for t in self.decision_trace
            ],
            predictions=[
                Prediction(
                    field_type=p.field_type,
                    confidence=p.confidence,
                    method=p.method or "",
                )
                for p in self.predictions
            ],
        )
