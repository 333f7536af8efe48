from .assistant import AssistantClassifier
from .base import AsyncClassifierStrategy, ClassifierStrategy
from .factory import DEFAULT_ORDER, build_default_pipeline, build_pipeline_from_names
from .html_fallback import HtmlFallbackClassifier
from .html_type import HtmlTypeClassifier
from .keyword import KeywordClassifier
from .soft_match import SoftMatchClassifier

__all__ = [
    "AssistantClassifier",
    "AsyncClassifierStrategy",
    "ClassifierStrategy",
    "DEFAULT_ORDER",
    "HtmlFallbackClassifier",
    "HtmlTypeClassifier",
    "KeywordClassifier",
    "SoftMatchClassifier",
    "build_default_pipeline",
    "build_pipeline_from_names",
]
