"""Field classification.

Pipeline:
- DetectionPipeline: ordered strategies, first confident answer wins
- build_default_pipeline / build_pipeline_from_names: pipeline factories

Strategies:
- HtmlTypeClassifier, KeywordClassifier, HtmlFallbackClassifier: rule based
- SoftMatchClassifier: learned vectors and the trained network
- AssistantClassifier: optional AI assistant, async only

Shared state:
- SoftMatchEngine: loaded network, vocabulary and learned vectors
- SharedInfrastructure: stores, engine and pipeline for the app lifespan
"""

from __future__ import annotations

from .assistant import (
    AssistantPort,
    AssistantRequest,
    AssistantVerdict,
    HttpAssistantClient,
)
from .pipeline import FALLBACK_CONFIDENCE, FALLBACK_METHOD, DetectionPipeline
from .result import (
    ClassifierResult,
    PipelineResult,
    SoftMatch,
    StrategyTiming,
    TraceEntry,
)
from .shared import SharedInfrastructure
from .soft_match import SoftMatchEngine
from .strategies import (
    DEFAULT_ORDER,
    AssistantClassifier,
    AsyncClassifierStrategy,
    ClassifierStrategy,
    HtmlFallbackClassifier,
    HtmlTypeClassifier,
    KeywordClassifier,
    SoftMatchClassifier,
    build_default_pipeline,
    build_pipeline_from_names,
)

__all__ = [
    # Pipeline
    "DEFAULT_ORDER",
    "DetectionPipeline",
    "FALLBACK_CONFIDENCE",
    "FALLBACK_METHOD",
    "build_default_pipeline",
    "build_pipeline_from_names",
    # Strategies
    "AssistantClassifier",
    "AsyncClassifierStrategy",
    "ClassifierStrategy",
    "HtmlFallbackClassifier",
    "HtmlTypeClassifier",
    "KeywordClassifier",
    "SoftMatchClassifier",
    # Results
    "ClassifierResult",
    "PipelineResult",
    "SoftMatch",
    "StrategyTiming",
    "TraceEntry",
    # Assistant
    "AssistantPort",
    "AssistantRequest",
    "AssistantVerdict",
    "HttpAssistantClient",
    # Shared state
    "SharedInfrastructure",
    "SoftMatchEngine",
]
