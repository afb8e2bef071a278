from fastapi import APIRouter, HTTPException, Request

from server.models.requests import GenerateEmbeddingsRequest
from shared.models.ingestion import EmbeddingStatusReport, IngestionSummary

router = APIRouter(prefix="/api/embeddings", tags=["embeddings"])


@router.post("/generate")
async def generate_embeddings(request: Request, body: GenerateEmbeddingsRequest) -> IngestionSummary:
    """Ingest the given transcripts and report the outcome per ID.

    Args:
        request (Request): FastAPI request (provides app.state.ingestion_service).
        body (GenerateEmbeddingsRequest): Transcript IDs and the batch mode.

    Returns:
        IngestionSummary: Per-transcript outcomes plus aggregate counts.
    """
    ingestion_service = request.app.state.ingestion_service
    return await ingestion_service.generate_many(body.transcript_ids, concurrent=body.concurrent)


@router.get("/status")
async def embeddings_status(request: Request, ids: str | None = None) -> EmbeddingStatusReport:
    """Embedding readiness of a comma-separated list of transcript IDs."""
    transcript_ids = [i.strip() for i in (ids or "").split(",") if i.strip()]
    if not transcript_ids:
        raise HTTPException(status_code=400, detail="Transcript IDs are required")
    ingestion_service = request.app.state.ingestion_service
    return await ingestion_service.get_status(transcript_ids)
