"""Trained model endpoints."""

import logging

from fastapi import APIRouter

from fieldsense.api.dependencies import InfraDep
from fieldsense.contracts import (
    DeleteModelResponse,
    ModelInfoResponse,
    TrainModelRequest,
)
from fieldsense.data_models import TrainingProgress, TrainingResult, TrainingSample

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/model")


@router.get("", response_model=ModelInfoResponse)
async def model_info(infra: InfraDep) -> ModelInfoResponse:
    meta = await infra.model.get_meta()
    return ModelInfoResponse(
        available=meta is not None,
        loaded=infra.engine.is_loaded,
        meta=meta,
        labels=await infra.model.get_labels(),
    )


@router.delete("", response_model=DeleteModelResponse)
async def delete_model(infra: InfraDep) -> DeleteModelResponse:
    existed = await infra.model.has_model()
    await infra.model.delete_model()
    infra.engine.dispose()
    return DeleteModelResponse(
        deleted=existed,
        message="Model deleted" if existed else "No model stored",
    )


def _log_progress(progress: TrainingProgress) -> None:
    if progress.epoch % 10 == 0 or progress.epoch == progress.total_epochs:
        logger.info(
            "Epoch %d/%d: loss=%.4f accuracy=%.3f",
            progress.epoch,
            progress.total_epochs,
            progress.loss,
            progress.accuracy,
        )


@router.post("/train", response_model=TrainingResult)
async def train_model(request: TrainModelRequest, infra: InfraDep) -> TrainingResult:
    """Train from the dataset and swap the new model into the engine."""
    samples = await infra.dataset.training_samples()
    if request.include_learned:
        samples += [
            TrainingSample(signals=e.signals, field_type=e.field_type)
            for e in await infra.learning.get_entries()
        ]

    logger.info("POST /model/train: %d samples", len(samples))
    result = await infra.trainer.train_from_dataset(samples, on_progress=_log_progress)
    if result.success:
        await infra.engine.reload()
    return result
