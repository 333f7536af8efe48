"""Training dataset endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status

from fieldsense.api.dependencies import InfraDep
from fieldsense.contracts import (
    AddDatasetEntryRequest,
    DatasetEntriesResponse,
    DeleteDatasetResponse,
    ImportDatasetRequest,
    ImportDatasetResponse,
)
from fieldsense.data_models import DatasetEntry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dataset")


@router.get("", response_model=DatasetEntriesResponse)
async def list_dataset(infra: InfraDep) -> DatasetEntriesResponse:
    entries = await infra.dataset.get_entries()
    return DatasetEntriesResponse(entries=entries, count=len(entries))


@router.post("", response_model=DatasetEntry, status_code=status.HTTP_201_CREATED)
async def add_dataset_entry(
    request: AddDatasetEntryRequest, infra: InfraDep
) -> DatasetEntry:
    try:
        return await infra.dataset.add_entry(
            request.signals,
            request.field_type,
            source=request.source,
            difficulty=request.difficulty,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from e


@router.post("/import", response_model=ImportDatasetResponse)
async def import_dataset(
    request: ImportDatasetRequest, infra: InfraDep
) -> ImportDatasetResponse:
    """Bulk import; samples already present are skipped."""
    added = await infra.dataset.import_entries(
        e.model_dump() for e in request.entries
    )
    total = await infra.dataset.count()
    logger.info("POST /dataset/import: added=%d, total=%d", added, total)
    return ImportDatasetResponse(added=added, total=total)


@router.delete("", response_model=DeleteDatasetResponse)
async def delete_dataset(
    infra: InfraDep, entry_id: str | None = None
) -> DeleteDatasetResponse:
    """Remove one entry by id, or clear the dataset when no id is given."""
    if entry_id is not None:
        deleted = await infra.dataset.remove_entry(entry_id)
        message = "Entry removed" if deleted else f"No entry with id {entry_id}"
    else:
        await infra.dataset.clear()
        deleted = True
        message = "Dataset cleared"

    remaining = await infra.dataset.count()
    return DeleteDatasetResponse(deleted=deleted, remaining=remaining, message=message)
