"""
API tests for the embeddings and health routes.

The app is used without its lifespan; services are replaced by mocks on
app.state.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from server.api_server import app
from shared.exceptions import NotFoundError, RetrievalUnavailableError
from shared.models.ingestion import (
    EmbeddingStatusReport,
    IngestionCounts,
    IngestionOutcome,
    IngestionStatus,
    IngestionSummary,
)


@pytest.fixture
def ingestion_service():
    service = MagicMock()
    service.generate_many = AsyncMock(return_value=IngestionSummary(
        summary=IngestionCounts(processed=2, generated=1, skipped=1),
        results=[
            IngestionOutcome(transcript_id="t1", status=IngestionStatus.GENERATED, message="Embeddings generated successfully", chunk_count=4),
            IngestionOutcome(transcript_id="t2", status=IngestionStatus.SKIPPED, reason="in-progress", message="Embeddings already being generated for this transcript"),
        ],
    ))
    service.get_status = AsyncMock(return_value=EmbeddingStatusReport(
        status="partial", total_transcripts=2, embedded_transcripts=1, transcripts=[],
    ))
    return service


@pytest.fixture
def client(ingestion_service):
    app.state.ingestion_service = ingestion_service
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_generate_returns_summary(client, ingestion_service):
    response = client.post("/api/embeddings/generate", json={"transcript_ids": ["t1", "t2"]})

    assert response.status_code == 200
    body = response.json()
    assert body["summary"] == {"processed": 2, "generated": 1, "skipped": 1, "errors": 0}
    assert body["results"][1]["reason"] == "in-progress"
    ingestion_service.generate_many.assert_awaited_once_with(["t1", "t2"], concurrent=False)


@pytest.mark.parametrize("body", [{}, {"transcript_ids": []}, {"transcript_ids": "t1"}])
def test_generate_validates_body(client, body):
    assert client.post("/api/embeddings/generate", json=body).status_code == 422


def test_status_splits_ids(client, ingestion_service):
    response = client.get("/api/embeddings/status", params={"ids": "t1, t2,"})

    assert response.status_code == 200
    assert response.json()["status"] == "partial"
    ingestion_service.get_status.assert_awaited_once_with(["t1", "t2"])


def test_status_requires_ids(client):
    assert client.get("/api/embeddings/status").status_code == 400


@pytest.mark.parametrize(
    "error,status_code,kind",
    [
        (NotFoundError("t1"), 404, "not-found"),
        (RetrievalUnavailableError("All retrieval strategies failed."), 503, "retrieval-unavailable"),
    ],
)
def test_pipeline_errors_are_mapped(client, ingestion_service, error, status_code, kind):
    ingestion_service.get_status.side_effect = error

    response = client.get("/api/embeddings/status", params={"ids": "t1"})

    assert response.status_code == status_code
    assert response.json()["error"] == kind
