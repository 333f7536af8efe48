"""Tests for DatasetStore."""

import pytest

from fieldsense.data_models import DatasetEntry
from fieldsense.storage import DatasetStore


class TestDatasetStore:
    @pytest.mark.asyncio
    async def test_add_normalizes(self, dataset_store: DatasetStore) -> None:
        entry = await dataset_store.add_entry("Número do CPF", "cpf")

        assert entry.signals == "numero do cpf"
        assert entry.source == "manual"
        assert await dataset_store.count() == 1

    @pytest.mark.asyncio
    async def test_add_duplicate_updates_in_place(
        self, dataset_store: DatasetStore
    ) -> None:
        first = await dataset_store.add_entry("CPF", "cpf")
        second = await dataset_store.add_entry("cpf", "cpf", source="auto")

        entries = await dataset_store.get_entries()
        assert len(entries) == 1
        assert second.id == first.id
        assert entries[0].source == "auto"

    @pytest.mark.asyncio
    async def test_same_signals_different_type_are_distinct(
        self, dataset_store: DatasetStore
    ) -> None:
        await dataset_store.add_entry("documento", "cpf")
        await dataset_store.add_entry("documento", "rg")

        assert await dataset_store.count() == 2

    @pytest.mark.asyncio
    async def test_add_empty_raises(self, dataset_store: DatasetStore) -> None:
        with pytest.raises(ValueError):
            await dataset_store.add_entry("  ?? ", "cpf")

    @pytest.mark.asyncio
    async def test_import_skips_duplicates(self, dataset_store: DatasetStore) -> None:
        await dataset_store.add_entry("email", "email")

        added = await dataset_store.import_entries(
            [
                {"signals": "E-mail", "field_type": "email"},
                {"signals": "email", "field_type": "email"},
                {"signals": "", "field_type": "email"},
                DatasetEntry(signals="telefone", field_type="phone", source="builtin"),
            ]
        )

        entries = {e.signals: e for e in await dataset_store.get_entries()}
        assert added == 2
        assert entries["e mail"].source == "imported"
        assert entries["telefone"].source == "builtin"

    @pytest.mark.asyncio
    async def test_remove_and_clear(self, dataset_store: DatasetStore) -> None:
        entry = await dataset_store.add_entry("cpf", "cpf")
        await dataset_store.add_entry("cep", "cep")

        assert await dataset_store.remove_entry(entry.id) is True
        assert await dataset_store.remove_entry(entry.id) is False
        assert await dataset_store.count() == 1

        await dataset_store.clear()
        assert await dataset_store.count() == 0

    @pytest.mark.asyncio
    async def test_training_samples(self, dataset_store: DatasetStore) -> None:
        await dataset_store.add_entry("cpf", "cpf")

        samples = await dataset_store.training_samples()

        assert [(s.signals, s.field_type) for s in samples] == [("cpf", "cpf")]
