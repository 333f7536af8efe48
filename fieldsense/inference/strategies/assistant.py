"""AI assistant classifier strategy.

Async-only: the sync `detect` never answers. Verdicts are persisted as learned
corrections and dataset samples so the soft-match engine picks them up on its
next refresh.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fieldsense.inference.assistant import AssistantRequest
from fieldsense.inference.result import ClassifierResult
from fieldsense.preprocessing import build_signal_text, infer_language_from_signals
from fieldsense.storage import StorageError

if TYPE_CHECKING:
    from fieldsense.contracts import FieldDescriptor
    from fieldsense.inference.assistant import AssistantPort, AssistantVerdict
    from fieldsense.inference.soft_match import SoftMatchEngine
    from fieldsense.storage import DatasetStore, LearningStore

logger = logging.getLogger(__name__)


class AssistantClassifier:
    name = "assistant"

    def __init__(
        self,
        port: AssistantPort,
        learning_store: LearningStore | None = None,
        dataset_store: DatasetStore | None = None,
        engine: SoftMatchEngine | None = None,
    ):
        self._port = port
        self._learning_store = learning_store
        self._dataset_store = dataset_store
        self._engine = engine

    def detect(self, field: FieldDescriptor) -> ClassifierResult | None:
        return None

    @staticmethod
    def build_request(field: FieldDescriptor) -> AssistantRequest:
        signals = build_signal_text(field)
        return AssistantRequest(
            signals=signals,
            element_html=field.element_html,
            context_html=field.context_html,
            input_type=field.input_type,
            language=infer_language_from_signals(signals),
        )

    async def detect_async(self, field: FieldDescriptor) -> ClassifierResult | None:
        request = self.build_request(field)
        if not request.signals and not request.element_html:
            return None

        try:
            verdict = await self._port.classify(request)
        except Exception as e:
            logger.warning("Assistant classification failed: %s", e)
            return None

        if verdict is None:
            return None

        logger.debug(
            "Assistant %r -> %s (generator=%s, %.2f)",
            request.signals,
            verdict.field_type,
            verdict.generator_type,
            verdict.confidence,
        )

        if request.signals:
            await self._remember(request.signals, verdict)

        return ClassifierResult(verdict.field_type, verdict.confidence, self.name)

    async def _remember(self, signals: str, verdict: AssistantVerdict) -> None:
        try:
            if self._dataset_store is not None:
                await self._dataset_store.add_entry(
                    signals, verdict.field_type, source="auto", difficulty="easy"
                )
            if self._learning_store is not None:
                await self._learning_store.store(
                    signals, verdict.field_type, verdict.generator_type, source="auto"
                )
                if self._engine is not None:
                    self._engine.invalidate()
        except StorageError as e:
            logger.warning("Failed to persist assistant verdict: %s", e)
