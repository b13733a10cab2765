"""
Test suite for the search endpoints.

Covers request validation, mode and default forwarding, and the related
content and metadata lookups.

System role: Verification of the retrieval HTTP API
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from procedures_rag.api.deps import get_retrieval_service
from procedures_rag.api.main import create_app
from procedures_rag.models.search import SearchMode, SearchResult, SearchResultMetadata


def _result(doc_id: str, similarity: float) -> SearchResult:
    return SearchResult(
        text=f"Snippet {doc_id}",
        metadata=SearchResultMetadata(id=doc_id, title="Wake Turbulence", chapter_number="5", section_number="5"),
        similarity=similarity,
        vector_similarity=similarity,
    )


@pytest.fixture
def mock_retrieval_service() -> MagicMock:
    service = MagicMock()
    service.search = AsyncMock(return_value=[_result("a", 0.82)])
    service.engine.related_content = AsyncMock(return_value=[_result("b", 0.91)])
    service.engine.search_by_metadata = AsyncMock(return_value=[_result("c", 1.0)])
    return service


@pytest.fixture
def client(mock_retrieval_service: MagicMock) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_retrieval_service] = lambda: mock_retrieval_service
    return TestClient(app)


class TestSearchEndpoint:
    """POST /api/v1/search."""

    def test_search_returns_results(self, client: TestClient, mock_retrieval_service: MagicMock) -> None:
        """Should return ranked snippets with citation metadata."""
        response = client.post("/api/v1/search", json={"query": "wake turbulence separation"})

        assert response.status_code == 200
        body = response.json()
        assert body[0]["metadata"]["id"] == "a"
        assert body[0]["metadata"]["chapter_number"] == "5"
        assert body[0]["similarity"] == pytest.approx(0.82)
        mock_retrieval_service.search.assert_awaited_once_with(
            "wake turbulence separation", limit=None, threshold=None, mode=SearchMode.HYBRID
        )

    def test_search_forwards_options(self, client: TestClient, mock_retrieval_service: MagicMock) -> None:
        """Should pass limit, threshold and mode through."""
        response = client.post(
            "/api/v1/search",
            json={"query": "hold short", "limit": 3, "threshold": 0.6, "mode": "vector"},
        )

        assert response.status_code == 200
        mock_retrieval_service.search.assert_awaited_once_with(
            "hold short", limit=3, threshold=0.6, mode=SearchMode.VECTOR
        )

    def test_empty_results(self, client: TestClient, mock_retrieval_service: MagicMock) -> None:
        """Should return an empty list rather than an error."""
        mock_retrieval_service.search.return_value = []

        response = client.post("/api/v1/search", json={"query": "anything"})

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize(
        "payload",
        [
            {"query": ""},
            {"query": "x", "limit": 0},
            {"query": "x", "threshold": 1.5},
            {"query": "x", "mode": "keyword"},
            {},
        ],
    )
    def test_invalid_request(self, client: TestClient, payload: dict) -> None:
        """Should reject invalid bodies with 422."""
        assert client.post("/api/v1/search", json=payload).status_code == 422


class TestLookupEndpoints:
    """Related content and metadata routes."""

    def test_related_content(self, client: TestClient, mock_retrieval_service: MagicMock) -> None:
        response = client.get("/api/v1/search/related/chunk-1", params={"limit": 3})

        assert response.status_code == 200
        assert response.json()[0]["metadata"]["id"] == "b"
        mock_retrieval_service.engine.related_content.assert_awaited_once_with("chunk-1", 3)

    def test_related_content_limit_bounds(self, client: TestClient) -> None:
        assert client.get("/api/v1/search/related/chunk-1", params={"limit": 0}).status_code == 422

    def test_search_by_metadata(self, client: TestClient, mock_retrieval_service: MagicMock) -> None:
        """Should forward the filters with the default limit of 20."""
        response = client.get("/api/v1/search/metadata", params={"type": "section", "chapter": "5"})

        assert response.status_code == 200
        assert response.json()[0]["similarity"] == 1.0
        mock_retrieval_service.engine.search_by_metadata.assert_awaited_once_with("section", "5", None, 20)
