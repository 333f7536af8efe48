"""Test fixtures for FieldSense."""

import itertools
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fieldsense.api import create_app
from fieldsense.config.settings import Settings
from fieldsense.contracts import FieldDescriptor
from fieldsense.data_models import TrainingSample
from fieldsense.storage import (
    DatasetStore,
    LearningStore,
    MemoryKeyValueStore,
    ModelStore,
)

# Signal variations per label, enough for a quick separable training run
SAMPLE_SIGNALS: dict[str, list[str]] = {
    "cpf": [
        "cpf",
        "cpf numero",
        "numero do cpf",
        "cpf do titular",
        "informe seu cpf",
        "cpf cliente",
        "documento cpf",
        "cpf responsavel",
    ],
    "email": [
        "email",
        "e mail",
        "seu email",
        "email corporativo",
        "endereco de email",
        "email contato",
        "correio eletronico",
        "email principal",
    ],
    "phone": [
        "telefone",
        "celular",
        "telefone fixo",
        "numero de celular",
        "whatsapp",
        "telefone contato",
        "fone",
        "celular com ddd",
    ],
}


@pytest.fixture
def temp_storage_path() -> Generator[Path, None, None]:
    """Create a temporary directory for file and database stores."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings(temp_storage_path: Path) -> Settings:
    """Create test settings with in-memory storage and a short training run."""
    return Settings(
        storage_backend="memory",
        data_dir=temp_storage_path,
        training_epochs=40,
        training_patience=10,
        training_seed=7,
        assistant_enabled=False,
    )


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def clock() -> Callable[[], int]:
    """Strictly increasing millisecond clock."""
    counter = itertools.count(1_000)
    return lambda: next(counter)


@pytest.fixture
def dataset_store(kv: MemoryKeyValueStore) -> DatasetStore:
    return DatasetStore(kv)


@pytest.fixture
def learning_store(
    kv: MemoryKeyValueStore,
    dataset_store: DatasetStore,
    clock: Callable[[], int],
) -> LearningStore:
    return LearningStore(kv, max_entries=500, dataset=dataset_store, clock=clock)


@pytest.fixture
def model_store(kv: MemoryKeyValueStore) -> ModelStore:
    return ModelStore(kv)


@pytest.fixture
def training_samples() -> list[TrainingSample]:
    return [
        TrainingSample(signals=signals, field_type=label)
        for label, variations in SAMPLE_SIGNALS.items()
        for signals in variations
    ]


@pytest.fixture
def make_field() -> Callable[..., FieldDescriptor]:
    """Factory for field descriptors with sensible defaults."""

    def _make(**kwargs) -> FieldDescriptor:
        kwargs.setdefault("selector", "#field")
        return FieldDescriptor(**kwargs)

    return _make


@pytest.fixture
def test_client(settings: Settings) -> Generator[TestClient, None, None]:
    """Create a test client running the full app lifespan on memory storage."""
    app = create_app(settings)
    with TestClient(app) as client:
        yield client
