from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fieldsense.inference.result import ClassifierResult
from fieldsense.preprocessing import build_signal_text

if TYPE_CHECKING:
    from fieldsense.contracts import FieldDescriptor
    from fieldsense.inference.soft_match import SoftMatchEngine

logger = logging.getLogger(__name__)


class SoftMatchClassifier:
    """Pipeline strategy wrapping the soft-match engine."""

    name = "soft-match"

    def __init__(self, engine: SoftMatchEngine):
        self._engine = engine

    def detect(self, field: FieldDescriptor) -> ClassifierResult | None:
        signals = build_signal_text(field)
        if not signals:
            return None

        match = self._engine.classify_by_soft_match(signals)
        if match is None:
            return None

        logger.debug(
            "Soft match %r -> %s (%s tier, %.2f)",
            signals,
            match.field_type,
            match.tier,
            match.confidence,
        )
        return ClassifierResult(match.field_type, match.confidence, self.name)

    async def detect_async(self, field: FieldDescriptor) -> ClassifierResult | None:
        await self._engine.load()
        return self.detect(field)
