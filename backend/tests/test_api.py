"""Tests for the HTTP surface: envelopes, status codes and routing."""
import logging

import pytest

from sanakota.exceptions import StoreError
from sanakota.main import create_app
from sanakota.routers.words import get_word_service
from sanakota.services.words import WordService


def create(client, **fields):
    body = {"lemma": "kala", "pos": "noun", **fields}
    response = client.post("/api/words", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class RecordingRepository:
    """Repository stand-in that records calls and can fail on demand."""

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def __getattr__(self, name):
        async def method(*args, **kwargs):
            self.calls.append(name)
            if self.error is not None:
                raise self.error
            return []

        return method


@pytest.fixture
def stub_repository(app, client):
    """Swap the repository behind the routes for a RecordingRepository."""

    def install(error=None):
        repository = RecordingRepository(error)
        app.dependency_overrides[get_word_service] = lambda: WordService(repository)
        return repository

    yield install
    app.dependency_overrides.clear()


class TestCreateWord:
    def test_create_returns_envelope(self, client):
        response = client.post("/api/words", json={"lemma": "kala", "pos": "noun"})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Word created successfully"
        word = body["data"]
        assert word["id"] is not None
        assert word["synonyms"] == []
        assert word["inflections"] == {}
        assert word["example_sentences"] == []
        assert word["translation"] is None
        assert word["created_at"]

    def test_missing_lemma_rejected(self, client):
        response = client.post("/api/words", json={"pos": "noun"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Lemma and part of speech are required"

    def test_blank_pos_rejected(self, client):
        response = client.post("/api/words", json={"lemma": "kala", "pos": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "Part of speech must be a non-empty string"

    def test_non_string_lemma_rejected(self, client):
        response = client.post("/api/words", json={"lemma": 42, "pos": "noun"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_round_trip_inflections(self, client):
        created = create(client, inflections={"Sg_Nom": "kala", "Sg_Gen": "kalan"})

        fetched = client.get(f"/api/words/{created['id']}").json()["data"]

        assert fetched["inflections"] == {"Sg_Nom": "kala", "Sg_Gen": "kalan"}
        assert fetched == created


class TestGetWord:
    def test_not_found(self, client):
        response = client.get("/api/words/9999")

        assert response.status_code == 404
        body = response.json()
        assert body == {"success": False, "error": "Word not found", "message": "Word 9999 not found"}

    def test_invalid_id(self, client):
        response = client.get("/api/words/not-a-number")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    @pytest.mark.parametrize("word_id", [2**63, 2**70])
    def test_out_of_range_id_not_found(self, client, word_id):
        assert client.get(f"/api/words/{word_id}").json() == {
            "success": False,
            "error": "Word not found",
            "message": f"Word {word_id} not found",
        }
        assert client.put(f"/api/words/{word_id}", json={"translation": "x"}).status_code == 404
        assert client.delete(f"/api/words/{word_id}").status_code == 404

    def test_by_lemma(self, client):
        created = create(client, lemma="Talo")

        response = client.get("/api/words/lemma/talo")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == created["id"]
        assert client.get("/api/words/lemma/tal").status_code == 404


class TestListWords:
    def test_filters_and_metadata(self, client):
        create(client, lemma="talo")
        create(client, lemma="kerrostalo")
        create(client, lemma="juosta", pos="verb")

        response = client.get("/api/words", params={"lemma": "talo", "pos": "noun"})

        body = response.json()
        assert body["success"] is True
        assert body["count"] == 2
        assert {w["lemma"] for w in body["data"]} == {"talo", "kerrostalo"}
        assert body["filters"]["lemma"] == "talo"
        assert body["filters"]["limit"] == 20
        assert body["filters"]["offset"] == 0

    def test_limit_and_offset(self, client):
        ids = [create(client, lemma=f"sana{i}")["id"] for i in range(5)]

        body = client.get("/api/words", params={"limit": 2, "offset": 1}).json()

        assert [w["id"] for w in body["data"]] == [ids[3], ids[2]]

    def test_limit_out_of_range(self, client):
        response = client.get("/api/words", params={"limit": 0})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_by_pos_and_category(self, client):
        create(client, lemma="talo", lexical_category="noun.artifact")
        create(client, lemma="auto", lexical_category="noun.artifact")
        create(client, lemma="juosta", pos="verb")

        by_pos = client.get("/api/words/pos/noun").json()
        by_category = client.get("/api/words/category/noun.artifact").json()

        assert by_pos["pos"] == "noun"
        assert [w["lemma"] for w in by_pos["data"]] == ["auto", "talo"]
        assert by_category["category"] == "noun.artifact"
        assert by_category["count"] == 2


class TestSearch:
    def test_search(self, client):
        create(client, lemma="kala", definition="aquatic animal")
        create(client, lemma="kivi", definition="hard mineral")

        body = client.get("/api/words/search", params={"q": "animal"}).json()

        assert body["success"] is True
        assert body["query"] == "animal"
        assert [w["lemma"] for w in body["data"]] == ["kala"]

    @pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
    def test_empty_query_rejected_before_repository(self, client, stub_repository, params):
        repository = stub_repository()

        response = client.get("/api/words/search", params=params)

        assert response.status_code == 400
        assert response.json()["error"] == "Search query is required"
        assert repository.calls == []


class TestUpdateWord:
    def test_partial_update(self, client):
        created = create(client, translation="fish", definition="aquatic animal")

        response = client.put(f"/api/words/{created['id']}", json={"translation": "a fish"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Word updated successfully"
        assert body["data"]["translation"] == "a fish"
        assert body["data"]["definition"] == "aquatic animal"
        assert body["data"]["updated_at"] >= created["updated_at"]

    def test_empty_body_keeps_fields(self, client):
        created = create(client, synonyms=["kala"], inflections={"Sg_Gen": "kalan"})

        updated = client.put(f"/api/words/{created['id']}", json={}).json()["data"]

        for field in ("lemma", "pos", "synonyms", "inflections", "example_sentences"):
            assert updated[field] == created[field]

    def test_blank_lemma_rejected(self, client):
        created = create(client)

        response = client.put(f"/api/words/{created['id']}", json={"lemma": ""})

        assert response.status_code == 400
        assert response.json()["error"] == "Lemma must be a non-empty string"

    def test_missing_word(self, client):
        response = client.put("/api/words/4242", json={"translation": "x"})
        assert response.status_code == 404


class TestDeleteWord:
    def test_delete_then_not_found(self, client):
        created = create(client)

        response = client.delete(f"/api/words/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Word deleted successfully"}
        assert client.get(f"/api/words/{created['id']}").status_code == 404
        assert client.delete(f"/api/words/{created['id']}").status_code == 404


class TestStats:
    def test_empty_stats(self, client):
        body = client.get("/api/words/stats").json()

        assert body["success"] is True
        assert body["data"] == {
            "total_words": 0,
            "unique_pos": 0,
            "unique_categories": 0,
            "first_word_date": None,
            "last_word_date": None,
        }

    def test_stats_counts(self, client):
        create(client, lexical_category="noun.animal")
        create(client, lemma="juosta", pos="verb")

        data = client.get("/api/words/stats").json()["data"]

        assert data["total_words"] == 2
        assert data["unique_pos"] == 2
        assert data["unique_categories"] == 1
        assert data["first_word_date"] is not None


class TestStoreFailure:
    def test_store_error_is_500(self, client, stub_repository):
        stub_repository(StoreError("connection refused"))

        response = client.get("/api/words")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Database error",
            "message": "connection refused",
        }


class TestServiceRoutes:
    def test_health(self, client):
        body = client.get("/health").json()

        assert body["status"] == "OK"
        assert body["database"] == "Connected"
        assert body["uptime"] >= 0
        assert body["timestamp"]

    def test_root(self, client):
        body = client.get("/").json()
        assert body["endpoints"]["words"] == "/api/words"

    def test_building_app_leaves_logging_alone(self, settings):
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level

        create_app(settings)

        assert root.handlers == handlers
        assert root.level == level

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Route not found",
            "path": "/api/nothing-here",
        }
