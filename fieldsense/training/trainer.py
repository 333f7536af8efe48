"""Runtime model trainer.

Trains the field network from labeled samples and persists the artifact the
soft-match engine loads:

    signals -> Linear(vocab, 256) -> ReLU -> Dropout(0.3)
            -> Linear(256, 128)   -> ReLU -> Dropout(0.2)
            -> Linear(128, n) -> softmax

Only labels present in the run become outputs, ordered as in
TRAINABLE_LABELS. Training keeps a deep copy of the weights from the epoch
with the best training accuracy and restores it at the end; it stops early
after `patience` epochs without improvement.

Fitting is CPU-bound and runs in a worker thread. It is never triggered by a
classification call.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np
import torch
from numpy.typing import NDArray
from torch import nn

from fieldsense.config.field_types import TRAINABLE_LABELS
from fieldsense.data_models import (
    TrainingArtifact,
    TrainingMeta,
    TrainingProgress,
    TrainingResult,
)
from fieldsense.models import FieldNetwork
from fieldsense.preprocessing import Vocabulary, build_vocabulary, vectorize_batch

if TYPE_CHECKING:
    from fieldsense.config.settings import Settings
    from fieldsense.storage import ModelStore

logger = logging.getLogger(__name__)

MIN_SAMPLES = 10
MIN_CLASSES = 2

ProgressCallback = Callable[[TrainingProgress], None]


class LabeledSample(Protocol):
    signals: str
    field_type: str


@dataclass
class _FitState:
    """Metrics accumulated while fitting; survives a failure mid-run."""

    epochs_run: int = 0
    final_loss: float = 0.0
    final_accuracy: float = 0.0
    best_accuracy: float = -1.0
    best_state: dict[str, Any] | None = None


class ModelTrainer:
    """Builds a vocabulary, fits the network and stores the artifact."""

    def __init__(
        self,
        model_store: ModelStore,
        epochs: int = 80,
        batch_size: int = 32,
        patience: int = 20,
        learning_rate: float = 0.001,
        l2: float = 1e-4,
        min_samples: int = MIN_SAMPLES,
        validation_split: float = 0.0,
        seed: int | None = None,
        labels: Sequence[str] = TRAINABLE_LABELS,
    ):
        self._model_store = model_store
        self.epochs = epochs
        self.batch_size = batch_size
        self.patience = patience
        self.learning_rate = learning_rate
        self.l2 = l2
        self.min_samples = min_samples
        self.validation_split = validation_split
        self.seed = seed
        self.labels = tuple(labels)

    @classmethod
    def from_settings(
        cls, model_store: ModelStore, settings: Settings
    ) -> ModelTrainer:
        return cls(
            model_store,
            epochs=settings.training_epochs,
            batch_size=settings.training_batch_size,
            patience=settings.training_patience,
            learning_rate=settings.training_learning_rate,
            l2=settings.training_l2,
            min_samples=settings.training_min_samples,
            validation_split=settings.training_validation_split,
            seed=settings.training_seed,
        )

    async def train_from_dataset(
        self,
        samples: Sequence[LabeledSample],
        on_progress: ProgressCallback | None = None,
    ) -> TrainingResult:
        """Train and persist a model.

        Never raises: small or single-class datasets and failures during
        fitting or persistence come back as `success=False` with whatever
        metrics were collected. `on_progress` is called once per epoch from the
        training thread.
        """
        t0 = time.perf_counter()

        known = set(self.labels)
        usable = [s for s in samples if s.field_type in known and s.signals.strip()]
        if len(usable) < self.min_samples:
            return TrainingResult(
                success=False,
                error=(
                    f"Dataset too small ({len(usable)} valid samples). "
                    f"Minimum: {self.min_samples}."
                ),
            )

        seen = {s.field_type for s in usable}
        present = [label for label in self.labels if label in seen]
        if len(present) < MIN_CLASSES:
            return TrainingResult(
                success=False,
                error=(
                    f"At least {MIN_CLASSES} distinct field types are required; "
                    f"found {len(present)} ({present[0] if present else 'none'})."
                ),
                num_classes=len(present),
                entries_used=len(usable),
            )

        texts = [s.signals for s in usable]
        vocab = build_vocabulary(texts)
        label_index = {label: i for i, label in enumerate(present)}
        x = vectorize_batch(texts, vocab)
        y = np.array([label_index[s.field_type] for s in usable], dtype=np.int64)

        logger.info(
            "Training: samples=%d, classes=%d, vocab=%d",
            len(usable),
            len(present),
            len(vocab),
        )

        state = _FitState()
        try:
            network = await asyncio.to_thread(
                self._fit, x, y, len(present), state, on_progress
            )
            meta = TrainingMeta(
                trained_at=datetime.now(timezone.utc).isoformat(),
                epochs=state.epochs_run,
                final_loss=state.final_loss,
                final_accuracy=max(state.best_accuracy, 0.0),
                vocab_size=len(vocab),
                num_classes=len(present),
                entries_used=len(usable),
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
            await self._model_store.save(self._artifact(network, vocab, present, meta))
        except Exception as e:
            logger.exception("Training failed")
            return TrainingResult(
                success=False,
                error=str(e) or type(e).__name__,
                epochs=state.epochs_run,
                final_loss=state.final_loss,
                final_accuracy=state.final_accuracy,
                vocab_size=len(vocab),
                num_classes=len(present),
                entries_used=len(usable),
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
        finally:
            state.best_state = None

        logger.info(
            "Training complete: epochs=%d, loss=%.4f, accuracy=%.3f (%.0fms)",
            meta.epochs,
            meta.final_loss,
            meta.final_accuracy,
            meta.duration_ms,
        )
        return TrainingResult(success=True, **meta.model_dump(exclude={"trained_at"}))

    @staticmethod
    def _artifact(
        network: FieldNetwork,
        vocab: Vocabulary,
        labels: list[str],
        meta: TrainingMeta,
    ) -> TrainingArtifact:
        return TrainingArtifact(
            topology=network.topology(),
            weights=network.weights_bytes(),
            vocabulary=vocab,
            labels=labels,
            meta=meta,
        )

    def _split(
        self, n: int, generator: torch.Generator | None
    ) -> tuple[torch.Tensor, torch.Tensor | None]:
        """Indices for training and (optionally) validation."""
        perm = torch.randperm(n, generator=generator)
        n_val = int(n * self.validation_split)
        if n_val < 1 or n - n_val < 1:
            return perm, None
        return perm[n_val:], perm[:n_val]

    def _fit(
        self,
        x: NDArray[np.float32],
        y: NDArray[np.int64],
        num_classes: int,
        state: _FitState,
        on_progress: ProgressCallback | None,
    ) -> FieldNetwork:
        generator = None
        if self.seed is not None:
            torch.manual_seed(self.seed)
            generator = torch.Generator().manual_seed(self.seed)

        network = FieldNetwork(input_dim=x.shape[1], num_classes=num_classes)
        optimizer = torch.optim.Adam(network.parameters(), lr=self.learning_rate)
        loss_fn = nn.CrossEntropyLoss()

        x_all = torch.from_numpy(x)
        y_all = torch.from_numpy(y)
        train_idx, val_idx = self._split(len(y_all), generator)
        x_train, y_train = x_all[train_idx], y_all[train_idx]
        n_train = len(y_train)

        patience = 0
        for epoch in range(self.epochs):
            network.train()
            perm = torch.randperm(n_train, generator=generator)
            total_loss = 0.0
            correct = 0

            for start in range(0, n_train, self.batch_size):
                batch = perm[start : start + self.batch_size]
                xb, yb = x_train[batch], y_train[batch]

                optimizer.zero_grad()
                logits = network(xb)
                penalty = sum(w.pow(2).sum() for w in network.hidden_kernels())
                loss = loss_fn(logits, yb) + self.l2 * penalty
                loss.backward()
                optimizer.step()

                total_loss += loss.item() * len(batch)
                correct += int((logits.argmax(dim=1) == yb).sum().item())

            epoch_loss = total_loss / n_train
            accuracy = correct / n_train

            val_loss: float | None = None
            val_accuracy: float | None = None
            if val_idx is not None:
                network.eval()
                with torch.no_grad():
                    val_logits = network(x_all[val_idx])
                    val_loss = float(loss_fn(val_logits, y_all[val_idx]).item())
                    hits = val_logits.argmax(dim=1) == y_all[val_idx]
                    val_accuracy = float(hits.float().mean().item())

            state.epochs_run = epoch + 1
            state.final_loss = epoch_loss
            state.final_accuracy = accuracy

            if accuracy > state.best_accuracy:
                state.best_accuracy = accuracy
                state.best_state = copy.deepcopy(network.state_dict())
                patience = 0
            else:
                patience += 1

            if on_progress is not None:
                on_progress(
                    TrainingProgress(
                        epoch=epoch + 1,
                        total_epochs=self.epochs,
                        loss=epoch_loss,
                        accuracy=accuracy,
                        val_loss=val_loss,
                        val_accuracy=val_accuracy,
                    )
                )

            logger.debug(
                "Epoch %d/%d: loss=%.4f accuracy=%.3f",
                epoch + 1,
                self.epochs,
                epoch_loss,
                accuracy,
            )

            if patience >= self.patience:
                logger.info("Early stopping after %d epochs", epoch + 1)
                break

        if state.best_state is not None:
            network.load_state_dict(state.best_state)
        network.eval()
        return network
