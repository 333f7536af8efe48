from dataclasses import dataclass
from typing import Protocol


@dataclass
class AssistantRequest:
    """What the assistant sees of a field."""

    signals: str
    element_html: str | None = None
    context_html: str | None = None
    input_type: str | None = None
    language: str = "pt"


@dataclass
class AssistantVerdict:
    """A classification returned by the assistant."""

    field_type: str
    confidence: float
    generator_type: str | None = None


class AssistantPort(Protocol):
    """Port for AI assistant classifiers."""

    async def classify(self, request: AssistantRequest) -> AssistantVerdict | None:
        """Classify a field, or return None when unavailable or unsure."""
        ...
