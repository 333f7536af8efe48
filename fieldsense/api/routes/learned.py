"""Learned correction endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status

from fieldsense.api.dependencies import InfraDep
from fieldsense.contracts import (
    DeleteLearnedResponse,
    LearnedEntriesResponse,
    RetrainFromRulesRequest,
    StoreLearnedRequest,
)
from fieldsense.data_models import LearnedEntry, RetrainResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/learned")


@router.get("", response_model=LearnedEntriesResponse)
async def list_learned(infra: InfraDep) -> LearnedEntriesResponse:
    entries = await infra.learning.get_entries()
    return LearnedEntriesResponse(entries=entries, count=len(entries))


@router.post("", response_model=LearnedEntry, status_code=status.HTTP_201_CREATED)
async def store_learned(request: StoreLearnedRequest, infra: InfraDep) -> LearnedEntry:
    """Record a correction; the soft-match engine picks it up in the background."""
    entry = await infra.learning.store(
        request.signals,
        request.field_type,
        request.generator_type,
        source=request.source,
    )
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Signals are empty after normalization",
        )
    infra.engine.invalidate()
    return entry


@router.delete("", response_model=DeleteLearnedResponse)
async def delete_learned(
    infra: InfraDep,
    signals: str | None = None,
    rule_only: bool = False,
) -> DeleteLearnedResponse:
    """Remove one entry by signals, or clear entries in bulk.

    Without `signals` every entry is cleared, or only rule-derived ones when
    `rule_only` is set.
    """
    if signals is not None:
        deleted = await infra.learning.remove(signals)
        message = "Entry removed" if deleted else "No entry for these signals"
    elif rule_only:
        removed = await infra.learning.clear_rule_derived()
        deleted = removed > 0
        message = f"Removed {removed} rule-derived entries"
    else:
        await infra.learning.clear_all()
        deleted = True
        message = "All learned entries cleared"

    if deleted:
        infra.engine.invalidate()

    remaining = await infra.learning.count()
    logger.info("DELETE /learned: %s (remaining=%d)", message, remaining)
    return DeleteLearnedResponse(deleted=deleted, remaining=remaining, message=message)


@router.post("/retrain-from-rules", response_model=RetrainResult)
async def retrain_from_rules(
    request: RetrainFromRulesRequest, infra: InfraDep
) -> RetrainResult:
    """Rebuild rule-derived entries and register them in the dataset."""
    result = await infra.learning.retrain_from_rules(request.rules)
    infra.engine.invalidate()
    return result
