"""Field classification endpoints."""

import logging

from fastapi import APIRouter

from fieldsense.api.dependencies import EngineDep, InfraDep
from fieldsense.contracts import (
    ClassifyRequest,
    ClassifyResponse,
    Prediction,
    SoftMatchRequest,
    SoftMatchResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/classify", response_model=ClassifyResponse)
async def classify_field(
    request: ClassifyRequest, infra: InfraDep
) -> ClassifyResponse:
    """Run the detection pipeline on one field.

    `strategies` overrides the pipeline order for this request only.
    """
    pipeline = infra.pipeline_for(request.strategies)

    # The sync path never loads the engine itself
    await infra.engine.load()

    if request.use_async:
        result = await pipeline.run_async(request.field)
    else:
        result = pipeline.run(request.field)

    logger.info(
        "POST /classify: %s -> %s via %s (%.2f, %.1fms)",
        request.field.selector or request.field.name or "-",
        result.field_type,
        result.method,
        result.confidence,
        result.duration_ms,
    )
    return result.to_response()


@router.post("/classify/soft-match", response_model=SoftMatchResponse)
async def soft_match(request: SoftMatchRequest, engine: EngineDep) -> SoftMatchResponse:
    """Classify raw signals with learned vectors and the trained network only."""
    await engine.load()
    match = engine.classify_by_soft_match(request.signals)
    if match is None:
        return SoftMatchResponse(match=None, model_loaded=engine.is_loaded)

    return SoftMatchResponse(
        match=Prediction(
            field_type=match.field_type,
            confidence=match.confidence,
            method=f"soft-match:{match.tier}",
        ),
        model_loaded=engine.is_loaded,
    )
