"""Health check endpoint."""

from fastapi import APIRouter

from fieldsense import __version__
from fieldsense.api.dependencies import InfraDep
from fieldsense.contracts import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(infra: InfraDep) -> HealthResponse:
    """Check service health and soft-match model status."""
    return HealthResponse(
        status="ok",
        version=__version__,
        model_loaded=infra.engine.is_loaded,
        learned_vectors=infra.engine.learned_count,
        storage_backend=infra.settings.storage_backend,
        assistant_enabled=infra.assistant is not None,
        strategies=infra.pipeline.names,
    )
