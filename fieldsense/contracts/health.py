"""Health check contract."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Service health status."""

    status: str = "ok"
    version: str

    # Soft-match engine status
    model_loaded: bool
    learned_vectors: int = 0

    storage_backend: str
    assistant_enabled: bool
    strategies: list[str] = []
