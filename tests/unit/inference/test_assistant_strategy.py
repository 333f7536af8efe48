"""Tests for AssistantClassifier."""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from fieldsense.contracts import FieldDescriptor
from fieldsense.inference import (
    AssistantClassifier,
    AssistantRequest,
    AssistantVerdict,
)
from fieldsense.storage import DatasetStore, LearningStore

MakeField = Callable[..., FieldDescriptor]


class FakeAssistant:
    def __init__(self, verdict: AssistantVerdict | None = None, error: bool = False):
        self.verdict = verdict
        self.error = error
        self.requests: list[AssistantRequest] = []

    async def classify(self, request: AssistantRequest) -> AssistantVerdict | None:
        self.requests.append(request)
        if self.error:
            raise RuntimeError("assistant crashed")
        return self.verdict


class TestAssistantClassifier:
    def test_sync_detect_never_answers(self, make_field: MakeField) -> None:
        port = FakeAssistant(AssistantVerdict("cpf", 0.9))

        assert AssistantClassifier(port).detect(make_field(label="CPF")) is None
        assert port.requests == []

    def test_build_request(self, make_field: MakeField) -> None:
        field = make_field(
            label="Your e-mail", input_type="text", element_html="<input>"
        )

        request = AssistantClassifier.build_request(field)

        assert request.signals == "your e mail"
        assert request.language == "en"
        assert request.element_html == "<input>"

    @pytest.mark.asyncio
    async def test_verdict_is_remembered(
        self,
        make_field: MakeField,
        learning_store: LearningStore,
        dataset_store: DatasetStore,
    ) -> None:
        engine = MagicMock()
        port = FakeAssistant(AssistantVerdict("cpf", 0.88, generator_type="cpf"))
        classifier = AssistantClassifier(
            port,
            learning_store=learning_store,
            dataset_store=dataset_store,
            engine=engine,
        )

        result = await classifier.detect_async(make_field(label="Documento CPF"))

        assert result is not None
        assert (result.field_type, result.confidence, result.method) == (
            "cpf",
            0.88,
            "assistant",
        )
        learned = await learning_store.get_entries()
        assert [(e.signals, e.field_type, e.source) for e in learned] == [
            ("documento cpf", "cpf", "auto")
        ]
        dataset = await dataset_store.get_entries()
        assert [(e.signals, e.source) for e in dataset] == [("documento cpf", "auto")]
        engine.invalidate.assert_called_once()

    @pytest.mark.asyncio
    async def test_no_verdict(self, make_field: MakeField) -> None:
        classifier = AssistantClassifier(FakeAssistant(None))

        assert await classifier.detect_async(make_field(label="CPF")) is None

    @pytest.mark.asyncio
    async def test_port_failure_is_swallowed(self, make_field: MakeField) -> None:
        classifier = AssistantClassifier(FakeAssistant(error=True))

        assert await classifier.detect_async(make_field(label="CPF")) is None

    @pytest.mark.asyncio
    async def test_empty_field_skips_port(self, make_field: MakeField) -> None:
        port = FakeAssistant(AssistantVerdict("cpf", 0.9))

        assert await AssistantClassifier(port).detect_async(make_field()) is None
        assert port.requests == []
