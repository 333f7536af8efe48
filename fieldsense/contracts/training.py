"""Model training contracts."""

from pydantic import BaseModel

from fieldsense.data_models import TrainingMeta


class TrainModelRequest(BaseModel):
    """Train from the runtime dataset, optionally adding learned entries."""

    include_learned: bool = False


class ModelInfoResponse(BaseModel):
    available: bool
    loaded: bool
    meta: TrainingMeta | None = None
    labels: list[str] = []


class DeleteModelResponse(BaseModel):
    deleted: bool
    message: str
