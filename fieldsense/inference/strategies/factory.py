"""Pipeline factories.

Pipeline configuration is session-scoped: built from settings or a request,
never persisted.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from fieldsense.inference.pipeline import DetectionPipeline

from .assistant import AssistantClassifier
from .html_fallback import HtmlFallbackClassifier
from .html_type import HtmlTypeClassifier
from .keyword import KeywordClassifier
from .soft_match import SoftMatchClassifier

if TYPE_CHECKING:
    from fieldsense.inference.assistant import AssistantPort
    from fieldsense.inference.soft_match import SoftMatchEngine
    from fieldsense.storage import DatasetStore, LearningStore

    from .base import ClassifierStrategy

logger = logging.getLogger(__name__)

DEFAULT_ORDER = ("html-type", "keyword", "soft-match", "assistant", "html-fallback")


def _all_strategies(
    engine: SoftMatchEngine,
    assistant: AssistantPort | None,
    learning_store: LearningStore | None,
    dataset_store: DatasetStore | None,
) -> list[ClassifierStrategy]:
    strategies: list[ClassifierStrategy] = [
        HtmlTypeClassifier(),
        KeywordClassifier(),
        SoftMatchClassifier(engine),
    ]
    if assistant is not None:
        strategies.append(
            AssistantClassifier(
                assistant,
                learning_store=learning_store,
                dataset_store=dataset_store,
                engine=engine,
            )
        )
    strategies.append(HtmlFallbackClassifier())
    return strategies


def build_default_pipeline(
    engine: SoftMatchEngine,
    assistant: AssistantPort | None = None,
    learning_store: LearningStore | None = None,
    dataset_store: DatasetStore | None = None,
) -> DetectionPipeline:
    """html-type -> keyword -> soft-match -> assistant -> html-fallback.

    The assistant strategy is only included when a port is given.
    """
    strategies = _all_strategies(engine, assistant, learning_store, dataset_store)
    return DetectionPipeline(tuple(strategies)).with_order(DEFAULT_ORDER)


def build_pipeline_from_names(
    names: Sequence[str],
    engine: SoftMatchEngine,
    assistant: AssistantPort | None = None,
    learning_store: LearningStore | None = None,
    dataset_store: DatasetStore | None = None,
) -> DetectionPipeline:
    """Build a pipeline with only the named strategies, in the given order."""
    pipeline = build_default_pipeline(engine, assistant, learning_store, dataset_store)
    unknown = [n for n in names if n not in pipeline.names]
    if unknown:
        logger.warning("Ignoring unavailable strategies: %s", ", ".join(unknown))
    return pipeline.with_order(names)
