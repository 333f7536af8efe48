"""Training dataset domain model."""

import time
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

DatasetSource = Literal["manual", "auto", "imported", "builtin"]
Difficulty = Literal["easy", "medium", "hard"]


def now_ms() -> int:
    return int(time.time() * 1000)


class DatasetEntry(BaseModel):
    """Labeled training sample."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    signals: str
    field_type: str
    source: DatasetSource = "manual"
    difficulty: Difficulty = "easy"
    created_at: int = Field(default_factory=now_ms)

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.signals, self.field_type)
