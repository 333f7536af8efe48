from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._utils import resolve_env_file_path


class Settings(BaseSettings):
    """Field classifier configuration."""

    log_level: str = "INFO"

    # Where learned entries, the dataset and the trained model live.
    # "database" uses database_url, "file" a JSON document under data_dir.
    storage_backend: Literal["memory", "file", "database"] = "file"
    data_dir: Path = Path("data")
    database_url: str = "sqlite+aiosqlite:///data/fieldsense.db"
    database_echo: bool = False

    # Soft-match thresholds; learned_threshold is expected above network_threshold
    learned_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    network_threshold: float = Field(default=0.2, ge=0.0, le=1.0)
    max_learned_entries: int = Field(default=500, gt=0)

    # Trainer
    training_epochs: int = Field(default=80, gt=0)
    training_batch_size: int = Field(default=32, gt=0)
    training_patience: int = Field(default=20, gt=0)
    training_learning_rate: float = 0.001
    training_l2: float = 1e-4
    training_min_samples: int = 10
    training_validation_split: float = Field(default=0.0, ge=0.0, lt=1.0)
    training_seed: int | None = None

    # AI assistant collaborator
    assistant_enabled: bool = False
    assistant_url: str = "http://localhost:8600"
    assistant_timeout: float = 60.0
    assistant_cooldown_seconds: float = 60.0

    # Session-scoped pipeline order; strategies not listed are dropped
    pipeline_order: list[str] = Field(
        default_factory=lambda: [
            "html-type",
            "keyword",
            "soft-match",
            "assistant",
            "html-fallback",
        ]
    )

    model_config = SettingsConfigDict(
        env_file=resolve_env_file_path(),
        env_file_encoding="utf-8",
        env_prefix="FIELDSENSE_",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
