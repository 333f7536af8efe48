from __future__ import annotations

from typing import TYPE_CHECKING

from fieldsense.config.keywords import HTML_INPUT_TYPES
from fieldsense.inference.result import ClassifierResult

if TYPE_CHECKING:
    from fieldsense.contracts import FieldDescriptor


class HtmlTypeClassifier:
    """Deterministic mapping from the element's tag and input type."""

    name = "html-type"

    def detect(self, field: FieldDescriptor) -> ClassifierResult | None:
        tag = (field.tag_name or "").lower()
        if tag == "select":
            return ClassifierResult("select", 1.0, self.name)
        if tag == "textarea":
            return None

        field_type = HTML_INPUT_TYPES.get((field.input_type or "").lower())
        if field_type is None:
            return None
        return ClassifierResult(field_type, 1.0, self.name)
