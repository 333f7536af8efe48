"""Tests for SoftMatchEngine."""

import asyncio

import pytest

from fieldsense.data_models import TrainingArtifact, TrainingMeta
from fieldsense.inference import SoftMatchEngine
from fieldsense.models import FieldNetwork
from fieldsense.preprocessing import build_vocabulary
from fieldsense.storage import LearningStore, ModelStore

TEXTS = ["cpf numero", "email", "telefone celular"]
LABELS = ["cpf", "email", "phone"]


def _artifact(labels: list[str] = LABELS, weights: bytes | None = None):
    vocab = build_vocabulary(TEXTS)
    network = FieldNetwork(input_dim=len(vocab), num_classes=len(LABELS))
    return TrainingArtifact(
        topology=network.topology(),
        weights=network.weights_bytes() if weights is None else weights,
        vocabulary=vocab,
        labels=labels,
        meta=TrainingMeta(
            trained_at="2026-01-01T00:00:00+00:00",
            epochs=1,
            final_loss=1.0,
            final_accuracy=0.5,
            vocab_size=len(vocab),
            num_classes=len(LABELS),
            entries_used=len(TEXTS),
            duration_ms=1.0,
        ),
    )


class TestLoading:
    @pytest.mark.asyncio
    async def test_not_loaded_returns_none(
        self, model_store: ModelStore, learning_store: LearningStore
    ) -> None:
        engine = SoftMatchEngine(model_store, learning_store)

        await engine.load()

        assert engine.is_loaded is False
        assert engine.classify_by_soft_match("cpf numero") is None

    @pytest.mark.asyncio
    async def test_missing_artifact_not_retried_until_reload(
        self, model_store: ModelStore, learning_store: LearningStore
    ) -> None:
        engine = SoftMatchEngine(model_store, learning_store)
        await engine.load()

        await model_store.save(_artifact())
        await engine.load()
        assert engine.is_loaded is False

        await engine.reload()
        assert engine.is_loaded is True
        assert engine.labels == LABELS
        assert engine.vocab_size == len(build_vocabulary(TEXTS))

    @pytest.mark.asyncio
    async def test_label_mismatch_is_rejected(
        self, model_store: ModelStore, learning_store: LearningStore
    ) -> None:
        await model_store.save(_artifact(labels=["cpf", "email"]))
        engine = SoftMatchEngine(model_store, learning_store)

        await engine.load()

        assert engine.is_loaded is False

    @pytest.mark.asyncio
    async def test_corrupt_weights_are_rejected(
        self, model_store: ModelStore, learning_store: LearningStore
    ) -> None:
        await model_store.save(_artifact(weights=b"not a state dict"))
        engine = SoftMatchEngine(model_store, learning_store)

        await engine.load()

        assert engine.is_loaded is False

    @pytest.mark.asyncio
    async def test_dispose(
        self, model_store: ModelStore, learning_store: LearningStore
    ) -> None:
        await model_store.save(_artifact())
        engine = SoftMatchEngine(model_store, learning_store)
        await engine.load()

        engine.dispose()

        assert engine.is_loaded is False
        assert engine.labels == []


class TestClassify:
    @pytest.mark.asyncio
    async def test_learned_tier_wins(
        self, model_store: ModelStore, learning_store: LearningStore
    ) -> None:
        await model_store.save(_artifact())
        await learning_store.store("CPF Número", "cpf")
        engine = SoftMatchEngine(model_store, learning_store)
        await engine.load()

        match = engine.classify_by_soft_match("CPF número")

        assert match is not None
        assert match.field_type == "cpf"
        assert match.tier == "learned"
        assert match.confidence == pytest.approx(1.0, abs=1e-5)

    @pytest.mark.asyncio
    async def test_network_tier(
        self, model_store: ModelStore, learning_store: LearningStore
    ) -> None:
        await model_store.save(_artifact())
        engine = SoftMatchEngine(model_store, learning_store, network_threshold=0.0)
        await engine.load()

        match = engine.classify_by_soft_match("telefone")

        assert match is not None
        assert match.tier == "network"
        assert match.field_type in LABELS
        assert 0.0 <= match.confidence <= 1.0

    @pytest.mark.asyncio
    async def test_below_thresholds_returns_none(
        self, model_store: ModelStore, learning_store: LearningStore
    ) -> None:
        await model_store.save(_artifact())
        engine = SoftMatchEngine(
            model_store, learning_store, learned_threshold=1.1, network_threshold=1.1
        )
        await engine.load()

        assert engine.classify_by_soft_match("telefone") is None

    @pytest.mark.asyncio
    async def test_no_overlap_returns_none(
        self, model_store: ModelStore, learning_store: LearningStore
    ) -> None:
        await model_store.save(_artifact())
        engine = SoftMatchEngine(model_store, learning_store, network_threshold=0.0)
        await engine.load()

        assert engine.classify_by_soft_match("zzzz qqqq") is None
        assert engine.classify_by_soft_match("  ") is None

    @pytest.mark.asyncio
    async def test_invalidate_picks_up_new_entries(
        self, model_store: ModelStore, learning_store: LearningStore
    ) -> None:
        await model_store.save(_artifact())
        await learning_store.store("email", "email")
        engine = SoftMatchEngine(model_store, learning_store)
        await engine.load()
        assert engine.learned_count == 1

        await learning_store.store("telefone celular", "phone")
        engine.invalidate()
        await engine.load()

        assert engine.learned_count == 2
        match = engine.classify_by_soft_match("Telefone / Celular")
        assert match is not None
        assert (match.field_type, match.tier) == ("phone", "learned")
        engine.dispose()

    @pytest.mark.asyncio
    async def test_invalidate_during_load_is_not_lost(
        self,
        model_store: ModelStore,
        learning_store: LearningStore,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        await model_store.save(_artifact())
        engine = SoftMatchEngine(model_store, learning_store)

        read_done = asyncio.Event()
        release = asyncio.Event()
        get_entries = learning_store.get_entries
        calls = 0

        async def slow_first_read():
            nonlocal calls
            calls += 1
            entries = await get_entries()
            if calls == 1:
                read_done.set()
                await release.wait()
            return entries

        monkeypatch.setattr(learning_store, "get_entries", slow_first_read)

        loading = asyncio.create_task(engine.load())
        await read_done.wait()

        # The in-flight read predates this entry
        await learning_store.store("cpf numero", "cpf")
        engine.invalidate()

        release.set()
        await loading
        await asyncio.gather(*engine._background)
        await engine.load()

        assert engine.learned_count == 1
        match = engine.classify_by_soft_match("CPF Número")
        assert match is not None
        assert (match.field_type, match.tier) == ("cpf", "learned")
        engine.dispose()
