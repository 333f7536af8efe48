"""HTTP API contracts for the field classification service."""

from fieldsense.contracts.classify import (
    ClassifyRequest,
    ClassifyResponse,
    Prediction,
    SoftMatchRequest,
    SoftMatchResponse,
    StrategyTimingModel,
    TraceEntryModel,
    TraceStatus,
)
from fieldsense.contracts.field import FieldDescriptor
from fieldsense.contracts.health import HealthResponse
from fieldsense.contracts.learning import (
    AddDatasetEntryRequest,
    DatasetEntriesResponse,
    DeleteDatasetResponse,
    DeleteLearnedResponse,
    ImportDatasetRequest,
    ImportDatasetResponse,
    LearnedEntriesResponse,
    RetrainFromRulesRequest,
    StoreLearnedRequest,
)
from fieldsense.contracts.training import (
    DeleteModelResponse,
    ModelInfoResponse,
    TrainModelRequest,
)

__all__ = [
    # Field
    "FieldDescriptor",
    # Classification
    "ClassifyRequest",
    "ClassifyResponse",
    "Prediction",
    "SoftMatchRequest",
    "SoftMatchResponse",
    "StrategyTimingModel",
    "TraceEntryModel",
    "TraceStatus",
    # Learned entries
    "StoreLearnedRequest",
    "LearnedEntriesResponse",
    "DeleteLearnedResponse",
    "RetrainFromRulesRequest",
    # Dataset
    "AddDatasetEntryRequest",
    "ImportDatasetRequest",
    "ImportDatasetResponse",
    "DatasetEntriesResponse",
    "DeleteDatasetResponse",
    # Model
    "TrainModelRequest",
    "ModelInfoResponse",
    "DeleteModelResponse",
    # Health
    "HealthResponse",
]
