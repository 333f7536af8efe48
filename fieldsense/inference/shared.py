"""Shared infrastructure for classification and training.

The resources here are created once (app lifespan or CLI command) and shared
by every request: one key-value backend, the stores built on it, the
soft-match engine and the default pipeline. Requests that reorder strategies
derive a new pipeline from these; nothing here is mutated per request.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fieldsense.storage import StoreFactory, create_kv_store
from fieldsense.training import ModelTrainer

from .assistant import HttpAssistantClient
from .soft_match import SoftMatchEngine
from .strategies import build_pipeline_from_names

if TYPE_CHECKING:
    from fieldsense.config.settings import Settings
    from fieldsense.storage import (
        DatasetStore,
        KeyValueStore,
        LearningStore,
        ModelStore,
    )

    from .assistant import AssistantPort
    from .pipeline import DetectionPipeline

logger = logging.getLogger(__name__)


@dataclass
class SharedInfrastructure:
    """Resources shared across all requests (singleton in app lifespan).

    - kv: the configured key-value backend
    - learning / dataset / model: stores sharing that backend
    - engine: soft-match engine, loaded lazily on the first soft match
    - assistant: optional AI assistant port
    - pipeline: strategies in the configured order
    """

    settings: Settings
    kv: KeyValueStore
    learning: LearningStore
    dataset: DatasetStore
    model: ModelStore
    engine: SoftMatchEngine
    trainer: ModelTrainer
    pipeline: DetectionPipeline
    assistant: AssistantPort | None = None

    @classmethod
    async def create(
        cls,
        settings: Settings,
        kv: KeyValueStore | None = None,
        assistant: AssistantPort | None = None,
    ) -> SharedInfrastructure:
        """Create shared infrastructure from settings.

        `kv` and `assistant` override what settings would build.
        """
        if kv is None:
            kv = await create_kv_store(settings)
        stores = StoreFactory(kv, settings)
        learning = stores.learning
        model = stores.model

        if assistant is None and settings.assistant_enabled:
            assistant = HttpAssistantClient(
                base_url=settings.assistant_url,
                timeout=settings.assistant_timeout,
                cooldown_seconds=settings.assistant_cooldown_seconds,
            )

        engine = SoftMatchEngine(
            model,
            learning,
            learned_threshold=settings.learned_threshold,
            network_threshold=settings.network_threshold,
        )
        infra = cls(
            settings=settings,
            kv=kv,
            learning=learning,
            dataset=stores.dataset,
            model=model,
            engine=engine,
            trainer=ModelTrainer.from_settings(model, settings),
            pipeline=build_pipeline_from_names(
                settings.pipeline_order,
                engine,
                assistant=assistant,
                learning_store=learning,
                dataset_store=stores.dataset,
            ),
            assistant=assistant,
        )
        logger.info("Pipeline: %s", " -> ".join(infra.pipeline.names))
        return infra

    def pipeline_for(self, names: Sequence[str] | None) -> DetectionPipeline:
        """The default pipeline, or one reordered to `names`."""
        if not names:
            return self.pipeline
        return build_pipeline_from_names(
            names,
            self.engine,
            assistant=self.assistant,
            learning_store=self.learning,
            dataset_store=self.dataset,
        )

    async def close(self) -> None:
        self.engine.dispose()
        await self.kv.close()
