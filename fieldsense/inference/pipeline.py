"""Detection pipeline.

Strategies run one at a time in a fixed order. The first result that is not
None and not "unknown" wins; when none qualifies the pipeline answers with the
low-confidence fallback, so every call returns a type.

Pipelines are immutable: `with_strategy`, `without`, `with_order` and
`insert_before` return new pipelines and never touch the receiver.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from fieldsense.config.field_types import UNKNOWN

from .result import ClassifierResult, PipelineResult, StrategyTiming, TraceEntry

if TYPE_CHECKING:
    from fieldsense.contracts import FieldDescriptor

    from .strategies.base import ClassifierStrategy

logger = logging.getLogger(__name__)

FALLBACK_METHOD = "html-fallback"
FALLBACK_CONFIDENCE = 0.1


@dataclass
class _RunState:
    """Bookkeeping for one pass through the strategies."""

    start: float = field(default_factory=time.perf_counter)
    timings: list[StrategyTiming] = field(default_factory=list)
    trace: list[TraceEntry] = field(default_factory=list)
    predictions: list[ClassifierResult] = field(default_factory=list)

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.start) * 1000

    def record(
        self,
        name: str,
        result: ClassifierResult | None,
        duration_ms: float,
    ) -> ClassifierResult | None:
        """Record one strategy outcome; return the result if it wins."""
        self.timings.append(StrategyTiming(strategy=name, duration_ms=duration_ms))

        if result is None:
            self.trace.append(TraceEntry(strategy=name, status="no-result"))
            return None

        if result.method is None:
            result = replace(result, method=name)
        self.predictions.append(result)

        if result.field_type == UNKNOWN:
            self.trace.append(
                TraceEntry(
                    strategy=name,
                    status="unknown-skipped",
                    field_type=result.field_type,
                    confidence=result.confidence,
                )
            )
            return None

        self.trace.append(
            TraceEntry(
                strategy=name,
                status="selected",
                field_type=result.field_type,
                confidence=result.confidence,
            )
        )
        return result

    def record_failure(self, name: str, error: Exception, duration_ms: float) -> None:
        logger.warning("Strategy %s failed: %s", name, error)
        self.timings.append(StrategyTiming(strategy=name, duration_ms=duration_ms))
        self.trace.append(TraceEntry(strategy=name, status="failed"))

    def finish(self, winner: ClassifierResult | None, method: str) -> PipelineResult:
        if winner is None:
            return PipelineResult(
                field_type=UNKNOWN,
                method=FALLBACK_METHOD,
                confidence=FALLBACK_CONFIDENCE,
                duration_ms=self.elapsed_ms(),
                timings=self.timings,
                decision_trace=self.trace,
                predictions=self.predictions,
            )
        return PipelineResult(
            field_type=winner.field_type,
            method=method,
            confidence=winner.confidence,
            duration_ms=self.elapsed_ms(),
            timings=self.timings,
            decision_trace=self.trace,
            predictions=self.predictions,
        )


@dataclass(frozen=True)
class DetectionPipeline:
    """Ordered, immutable sequence of classifier strategies."""

    strategies: tuple[ClassifierStrategy, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategies", tuple(self.strategies))

    @property
    def names(self) -> list[str]:
        return [s.name for s in self.strategies]

    def __len__(self) -> int:
        return len(self.strategies)

    # Builder operators

    def with_strategy(self, strategy: ClassifierStrategy) -> DetectionPipeline:
        """Append a strategy."""
        return replace(self, strategies=(*self.strategies, strategy))

    def without(self, *names: str) -> DetectionPipeline:
        """Remove strategies by name."""
        excluded = set(names)
        return replace(
            self,
            strategies=tuple(s for s in self.strategies if s.name not in excluded),
        )

    def with_order(self, names: Iterable[str]) -> DetectionPipeline:
        """Keep only the named strategies, in the given order.

        A name listed twice runs twice; unknown names are ignored.
        """
        by_name: dict[str, ClassifierStrategy] = {}
        for strategy in self.strategies:
            by_name.setdefault(strategy.name, strategy)

        ordered: list[ClassifierStrategy] = []
        for name in names:
            strategy = by_name.get(name)
            if strategy is not None:
                ordered.append(strategy)
        return replace(self, strategies=tuple(ordered))

    def insert_before(
        self, target: str, strategy: ClassifierStrategy
    ) -> DetectionPipeline:
        """Insert ahead of the named strategy, or append when it is absent."""
        for i, existing in enumerate(self.strategies):
            if existing.name == target:
                strategies = (*self.strategies[:i], strategy, *self.strategies[i:])
                return replace(self, strategies=strategies)
        return self.with_strategy(strategy)

    # Execution

    def run(self, field: FieldDescriptor) -> PipelineResult:
        """Classify synchronously, using only `detect`."""
        state = _RunState()

        for strategy in self.strategies:
            t0 = time.perf_counter()
            try:
                result = strategy.detect(field)
            except Exception as e:
                state.record_failure(strategy.name, e, _since_ms(t0))
                continue

            winner = state.record(strategy.name, result, _since_ms(t0))
            if winner is not None:
                return self._log(field, state.finish(winner, strategy.name))

        return self._log(field, state.finish(None, FALLBACK_METHOD))

    async def run_async(self, field: FieldDescriptor) -> PipelineResult:
        """Classify, awaiting `detect_async` on strategies that define it."""
        state = _RunState()

        for strategy in self.strategies:
            detect_async = getattr(strategy, "detect_async", None)
            t0 = time.perf_counter()
            try:
                if detect_async is not None:
                    result = await detect_async(field)
                else:
                    result = strategy.detect(field)
            except Exception as e:
                state.record_failure(strategy.name, e, _since_ms(t0))
                continue

            winner = state.record(strategy.name, result, _since_ms(t0))
            if winner is not None:
                return self._log(field, state.finish(winner, strategy.name))

        return self._log(field, state.finish(None, FALLBACK_METHOD))

    @staticmethod
    def _log(field: FieldDescriptor, result: PipelineResult) -> PipelineResult:
        logger.debug(
            "Classified %r -> %s via %s (%.2f, %.1fms)",
            field.selector or field.name or field.id,
            result.field_type,
            result.method,
            result.confidence,
            result.duration_ms,
        )
        return result


def _since_ms(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000
