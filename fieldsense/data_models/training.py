"""Model training domain models."""

from typing import Any

from pydantic import BaseModel


class TrainingSample(BaseModel):
    """Minimal labeled input accepted by the trainer."""

    signals: str
    field_type: str


class TrainingMeta(BaseModel):
    """Metadata persisted alongside a trained model."""

    trained_at: str
    epochs: int
    final_loss: float
    final_accuracy: float
    vocab_size: int
    num_classes: int
    entries_used: int
    duration_ms: float


class TrainingArtifact(BaseModel):
    """Everything needed to rebuild a trained network for inference."""

    topology: dict[str, Any]
    weights: bytes
    vocabulary: dict[str, int]
    labels: list[str]
    meta: TrainingMeta


class TrainingProgress(BaseModel):
    """Per-epoch progress report."""

    epoch: int
    total_epochs: int
    loss: float
    accuracy: float
    val_loss: float | None = None
    val_accuracy: float | None = None


class TrainingResult(BaseModel):
    """Outcome of a training run; failures carry whatever metrics accumulated."""

    success: bool
    error: str | None = None
    epochs: int = 0
    final_loss: float = 0.0
    final_accuracy: float = 0.0
    vocab_size: int = 0
    num_classes: int = 0
    entries_used: int = 0
    duration_ms: float = 0.0
