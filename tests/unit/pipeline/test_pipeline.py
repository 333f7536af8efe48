"""Tests for DetectionPipeline."""

import pytest

from fieldsense.contracts import FieldDescriptor
from fieldsense.inference import (
    FALLBACK_CONFIDENCE,
    FALLBACK_METHOD,
    ClassifierResult,
    DetectionPipeline,
)


class StubStrategy:
    """Sync strategy returning a fixed result and counting calls."""

    def __init__(self, name: str, result: ClassifierResult | None = None):
        self.name = name
        self.result = result
        self.calls = 0

    def detect(self, field: FieldDescriptor) -> ClassifierResult | None:
        self.calls += 1
        return self.result


class AsyncStubStrategy(StubStrategy):
    """Strategy that only answers through detect_async."""

    def __init__(self, name: str, result: ClassifierResult | None = None):
        super().__init__(name, None)
        self.async_result = result
        self.async_calls = 0

    async def detect_async(self, field: FieldDescriptor) -> ClassifierResult | None:
        self.async_calls += 1
        return self.async_result


class FailingStrategy:
    name = "broken"

    def detect(self, field: FieldDescriptor) -> ClassifierResult | None:
        raise RuntimeError("boom")


@pytest.fixture
def field() -> FieldDescriptor:
    return FieldDescriptor(selector="#cpf", label="CPF")


class TestRun:
    def test_first_result_short_circuits(self, field: FieldDescriptor) -> None:
        a = StubStrategy("a")
        b = StubStrategy("b", ClassifierResult("email", 0.9))
        c = StubStrategy("c", ClassifierResult("cpf", 1.0))
        pipeline = DetectionPipeline((a, b, c))

        result = pipeline.run(field)

        assert (result.field_type, result.confidence, result.method) == (
            "email",
            0.9,
            "b",
        )
        assert c.calls == 0
        assert [t.status for t in result.decision_trace] == ["no-result", "selected"]

    def test_unknown_is_skipped(self, field: FieldDescriptor) -> None:
        pipeline = DetectionPipeline(
            (
                StubStrategy("html-type"),
                StubStrategy("keyword", ClassifierResult("unknown", 0.1)),
                StubStrategy("soft-match", ClassifierResult("cpf", 0.85)),
            )
        )

        result = pipeline.run(field)

        assert result.field_type == "cpf"
        assert result.confidence == 0.85
        assert result.method == "soft-match"
        assert [t.status for t in result.decision_trace] == [
            "no-result",
            "unknown-skipped",
            "selected",
        ]
        assert [p.method for p in result.predictions] == ["keyword", "soft-match"]

    def test_fallback_when_nothing_qualifies(self, field: FieldDescriptor) -> None:
        pipeline = DetectionPipeline(
            (
                StubStrategy("a"),
                StubStrategy("b", ClassifierResult("unknown", 0.5)),
            )
        )

        result = pipeline.run(field)

        assert result.field_type == "unknown"
        assert result.method == FALLBACK_METHOD
        assert result.confidence == FALLBACK_CONFIDENCE

    def test_empty_pipeline_falls_back(self, field: FieldDescriptor) -> None:
        result = DetectionPipeline().run(field)

        assert result.field_type == "unknown"
        assert result.method == FALLBACK_METHOD
        assert result.timings == []

    def test_failing_strategy_is_traced_and_skipped(
        self, field: FieldDescriptor
    ) -> None:
        pipeline = DetectionPipeline(
            (FailingStrategy(), StubStrategy("ok", ClassifierResult("cpf", 0.7)))
        )

        result = pipeline.run(field)

        assert result.field_type == "cpf"
        assert result.decision_trace[0].status == "failed"
        assert [t.strategy for t in result.timings] == ["broken", "ok"]

    def test_sync_run_ignores_detect_async(self, field: FieldDescriptor) -> None:
        strategy = AsyncStubStrategy("assistant", ClassifierResult("cpf", 0.9))
        pipeline = DetectionPipeline((strategy,))

        result = pipeline.run(field)

        assert result.method == FALLBACK_METHOD
        assert strategy.async_calls == 0

    def test_response_contract(self, field: FieldDescriptor) -> None:
        strategy = StubStrategy("b", ClassifierResult("email", 0.9))
        pipeline = DetectionPipeline((strategy,))

        response = pipeline.run(field).to_response()

        assert response.field_type == "email"
        assert response.predictions[0].method == "b"
        assert response.decision_trace[0].status == "selected"


class TestRunAsync:
    @pytest.mark.asyncio
    async def test_prefers_detect_async(self, field: FieldDescriptor) -> None:
        strategy = AsyncStubStrategy("assistant", ClassifierResult("cpf", 0.9))
        pipeline = DetectionPipeline((StubStrategy("a"), strategy))

        result = await pipeline.run_async(field)

        assert result.field_type == "cpf"
        assert result.method == "assistant"
        assert strategy.async_calls == 1
        assert strategy.calls == 0

    @pytest.mark.asyncio
    async def test_falls_back_to_detect(self, field: FieldDescriptor) -> None:
        strategy = StubStrategy("a", ClassifierResult("phone", 1.0))
        pipeline = DetectionPipeline((strategy,))

        result = await pipeline.run_async(field)

        assert result.field_type == "phone"

    @pytest.mark.asyncio
    async def test_failing_strategy(self, field: FieldDescriptor) -> None:
        result = await DetectionPipeline((FailingStrategy(),)).run_async(field)

        assert result.method == FALLBACK_METHOD
        assert result.decision_trace[0].status == "failed"


class TestBuilders:
    def test_with_strategy_returns_new_pipeline(self) -> None:
        base = DetectionPipeline((StubStrategy("a"),))

        extended = base.with_strategy(StubStrategy("b"))

        assert base.names == ["a"]
        assert extended.names == ["a", "b"]

    def test_without(self) -> None:
        pipeline = DetectionPipeline(
            (StubStrategy("a"), StubStrategy("b"), StubStrategy("c"))
        )

        assert pipeline.without("b", "missing").names == ["a", "c"]
        assert pipeline.names == ["a", "b", "c"]

    def test_with_order_keeps_only_named(self) -> None:
        pipeline = DetectionPipeline(
            (StubStrategy("a"), StubStrategy("b"), StubStrategy("c"))
        )

        assert pipeline.with_order(["c", "a", "missing"]).names == ["c", "a"]

    def test_with_order_repeats_named_strategy(self) -> None:
        pipeline = DetectionPipeline((StubStrategy("a"), StubStrategy("b")))

        assert pipeline.with_order(["a", "b", "a"]).names == ["a", "b", "a"]

    def test_insert_before(self) -> None:
        pipeline = DetectionPipeline((StubStrategy("a"), StubStrategy("c")))

        assert pipeline.insert_before("c", StubStrategy("b")).names == ["a", "b", "c"]
        assert pipeline.insert_before("zzz", StubStrategy("b")).names == [
            "a",
            "c",
            "b",
        ]
        assert len(pipeline) == 2
