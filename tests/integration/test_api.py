"""Integration tests for API endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from fieldsense.data_models import TrainingSample
from fieldsense.storage import StorageError


def _import_samples(client: TestClient, samples: list[TrainingSample]) -> None:
    entries = [s.model_dump() for s in samples]
    response = client.post("/dataset/import", json={"entries": entries})
    assert response.status_code == 200


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_check(self, test_client: TestClient) -> None:
        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["model_loaded"] is False
        assert data["storage_backend"] == "memory"
        assert data["assistant_enabled"] is False
        assert data["strategies"] == [
            "html-type",
            "keyword",
            "soft-match",
            "html-fallback",
        ]


class TestClassifyEndpoint:
    """Tests for /classify endpoints."""

    def test_html_type(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/classify",
            json={"field": {"selector": "#mail", "input_type": "email"}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["field_type"] == "email"
        assert data["method"] == "html-type"
        assert data["confidence"] == 1.0
        assert data["decision_trace"][0]["status"] == "selected"

    def test_falls_back_without_model(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/classify",
            json={"field": {"selector": "#doc", "label": "Documento"}},
        )

        data = response.json()
        assert data["field_type"] == "unknown"
        assert data["method"] == "html-fallback"
        assert data["confidence"] == 0.1

    def test_strategy_override(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/classify",
            json={
                "field": {"label": "Observações", "input_type": "email"},
                "strategies": ["keyword", "html-type"],
                "use_async": False,
            },
        )

        data = response.json()
        assert data["field_type"] == "text"
        assert data["method"] == "keyword"
        assert [t["strategy"] for t in data["timings"]] == ["keyword"]

    def test_soft_match_without_model(self, test_client: TestClient) -> None:
        response = test_client.post("/classify/soft-match", json={"signals": "cpf"})

        assert response.status_code == 200
        assert response.json() == {"match": None, "model_loaded": False}


class TestLearnedEndpoints:
    """Tests for /learned endpoints."""

    def test_store_list_delete(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/learned", json={"signals": "CPF Número", "field_type": "cpf"}
        )
        assert response.status_code == 201
        assert response.json()["signals"] == "cpf numero"

        listing = test_client.get("/learned").json()
        assert listing["count"] == 1

        response = test_client.delete("/learned", params={"signals": "cpf número"})
        assert response.json() == {
            "deleted": True,
            "remaining": 0,
            "message": "Entry removed",
        }

    def test_store_empty_signals(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/learned", json={"signals": "!!!", "field_type": "cpf"}
        )

        assert response.status_code == 422

    def test_retrain_and_clear_rule_derived(self, test_client: TestClient) -> None:
        test_client.post("/learned", json={"signals": "Apelido", "field_type": "name"})
        response = test_client.post(
            "/learned/retrain-from-rules",
            json={
                "rules": [
                    {"id": "r1", "field_selector": "#cpf", "field_type": "cpf"},
                    {
                        "id": "r2",
                        "field_selector": "div > input",
                        "field_type": "unknown",
                    },
                ]
            },
        )

        result = response.json()
        assert (result["imported"], result["skipped"]) == (1, 1)
        assert test_client.get("/dataset").json()["count"] == 1

        response = test_client.delete("/learned", params={"rule_only": True})
        assert response.json()["remaining"] == 1

        response = test_client.delete("/learned")
        assert response.json()["remaining"] == 0

    def test_storage_failure_maps_to_503(
        self, test_client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        infra = test_client.app.state.infra
        monkeypatch.setattr(
            infra.learning,
            "get_entries",
            AsyncMock(side_effect=StorageError("backend down")),
        )

        response = test_client.get("/learned")

        assert response.status_code == 503
        assert "backend down" in response.json()["detail"]


class TestDatasetEndpoints:
    """Tests for /dataset endpoints."""

    def test_add_import_delete(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/dataset", json={"signals": "E-mail", "field_type": "email"}
        )
        assert response.status_code == 201
        entry_id = response.json()["id"]

        response = test_client.post(
            "/dataset/import",
            json={
                "entries": [
                    {"signals": "e mail", "field_type": "email"},
                    {"signals": "celular", "field_type": "phone"},
                ]
            },
        )
        assert response.json() == {"added": 1, "total": 2}

        response = test_client.delete("/dataset", params={"entry_id": entry_id})
        assert response.json()["remaining"] == 1

        response = test_client.delete("/dataset")
        assert response.json() == {
            "deleted": True,
            "remaining": 0,
            "message": "Dataset cleared",
        }

    def test_add_blank_signals(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/dataset", json={"signals": " - ", "field_type": "email"}
        )

        assert response.status_code == 422


class TestModelEndpoints:
    """Tests for /model endpoints."""

    def test_no_model(self, test_client: TestClient) -> None:
        data = test_client.get("/model").json()

        assert data["available"] is False
        assert data["loaded"] is False

    def test_train_rejects_small_dataset(self, test_client: TestClient) -> None:
        test_client.post("/dataset", json={"signals": "cpf", "field_type": "cpf"})

        result = test_client.post("/model/train", json={}).json()

        assert result["success"] is False
        assert "10" in result["error"]

    def test_train_then_delete(
        self, test_client: TestClient, training_samples: list[TrainingSample]
    ) -> None:
        _import_samples(test_client, training_samples)

        result = test_client.post("/model/train", json={}).json()
        assert result["success"] is True
        assert result["num_classes"] == 3

        info = test_client.get("/model").json()
        assert info["available"] is True
        assert info["loaded"] is True
        assert info["labels"] == ["cpf", "email", "phone"]

        soft = test_client.post("/classify/soft-match", json={"signals": "cpf"})
        assert soft.json()["model_loaded"] is True

        deleted = test_client.delete("/model").json()
        assert deleted["deleted"] is True
        assert test_client.get("/model").json()["loaded"] is False
