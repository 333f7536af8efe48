"""Learned entry and dataset management contracts."""

from pydantic import BaseModel, Field

from fieldsense.data_models import (
    DatasetEntry,
    DatasetSource,
    Difficulty,
    FieldRule,
    LearnedEntry,
    LearnedSource,
)

# -----------------------------------------------------------------------------
# Learned entries
# -----------------------------------------------------------------------------


class StoreLearnedRequest(BaseModel):
    """Record a signal → field type correction."""

    signals: str = Field(..., min_length=1)
    field_type: str
    generator_type: str | None = None
    source: LearnedSource = "auto"


class LearnedEntriesResponse(BaseModel):
    entries: list[LearnedEntry]
    count: int


class DeleteLearnedResponse(BaseModel):
    deleted: bool
    remaining: int
    message: str


class RetrainFromRulesRequest(BaseModel):
    rules: list[FieldRule]


# -----------------------------------------------------------------------------
# Dataset
# -----------------------------------------------------------------------------


class AddDatasetEntryRequest(BaseModel):
    signals: str = Field(..., min_length=1)
    field_type: str
    source: DatasetSource = "manual"
    difficulty: Difficulty = "easy"


class ImportDatasetRequest(BaseModel):
    entries: list[AddDatasetEntryRequest]


class ImportDatasetResponse(BaseModel):
    added: int
    total: int


class DatasetEntriesResponse(BaseModel):
    entries: list[DatasetEntry]
    count: int


class DeleteDatasetResponse(BaseModel):
    deleted: bool
    remaining: int
    message: str
