"""Classifier strategy interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from fieldsense.contracts import FieldDescriptor
    from fieldsense.inference.result import ClassifierResult


@runtime_checkable
class ClassifierStrategy(Protocol):
    """A detector consulted by the pipeline.

    `detect` is required. Strategies that need I/O may also define
    `async detect_async(field)`; the async pipeline prefers it when present.
    """

    name: str

    def detect(self, field: FieldDescriptor) -> ClassifierResult | None:
        """Return an opinion, or None to let the next strategy try."""
        ...


@runtime_checkable
class AsyncClassifierStrategy(ClassifierStrategy, Protocol):
    async def detect_async(self, field: FieldDescriptor) -> ClassifierResult | None:
        ...
