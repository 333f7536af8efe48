from .dataset import DatasetEntry, DatasetSource, Difficulty, now_ms
from .learned import LearnedEntry, LearnedSource, RetrainDetail, RetrainResult
from .rule import FieldRule
from .training import (
    TrainingArtifact,
    TrainingMeta,
    TrainingProgress,
    TrainingResult,
    TrainingSample,
)

__all__ = [
    "DatasetEntry",
    "DatasetSource",
    "Difficulty",
    "FieldRule",
    "LearnedEntry",
    "LearnedSource",
    "RetrainDetail",
    "RetrainResult",
    "TrainingArtifact",
    "TrainingMeta",
    "TrainingProgress",
    "TrainingResult",
    "TrainingSample",
    "now_ms",
]
