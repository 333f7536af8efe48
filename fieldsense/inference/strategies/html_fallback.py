from __future__ import annotations

from typing import TYPE_CHECKING

from fieldsense.config.field_types import UNKNOWN
from fieldsense.config.keywords import HTML_FALLBACK_TYPES
from fieldsense.inference.result import ClassifierResult

if TYPE_CHECKING:
    from fieldsense.contracts import FieldDescriptor

FALLBACK_CONFIDENCE = 0.1


class HtmlFallbackClassifier:
    """Last resort: always answers, "unknown" when the input type says nothing."""

    name = "html-fallback"

    def detect(self, field: FieldDescriptor) -> ClassifierResult:
        input_type = (field.input_type or "").lower()
        field_type = HTML_FALLBACK_TYPES.get(input_type, UNKNOWN)
        return ClassifierResult(field_type, FALLBACK_CONFIDENCE, self.name)
