"""Ingestion coordinator.

Turns transcripts into stored, versioned chunks: parse, fingerprint, chunk,
embed, persist, then record the ingestion metadata on the transcript. Each
transcript ID is ingested by at most one attempt at a time.
"""

import asyncio
import uuid
from datetime import datetime, timezone

from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.clients.rag.models.ChunkPayload import ChunkPayload
from shared.clients.rag.models.ChunkPoint import ChunkPoint
from shared.clients.transcript.TranscriptClientInterface import TranscriptClientInterface
from shared.exceptions import NoContentError, NotFoundError, TranscriptPipelineError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import PipelineSettings
from shared.models.ingestion import (
    EmbeddingStatusReport,
    IngestionCounts,
    IngestionOutcome,
    IngestionStatus,
    IngestionSummary,
    TranscriptEmbeddingStatus,
)
from shared.models.transcript import EmbeddingMetadata, Transcript
from services.transcript_ingest.IngestionLock import IngestionLock
from services.transcript_ingest.TextChunker import TextChunker
from services.transcript_ingest.Vectorizer import Vectorizer
from services.transcript_ingest.transcript_parser import fingerprint, normalize_transcript


def _make_point_id(transcript_id: str, content_hash: str, chunk_index: int) -> str:
    """Deterministic UUID5 point ID.

    The content hash is part of the key, so a new version of a transcript
    never overwrites the points of the version it replaces.
    """
    return str(uuid.uuid5(uuid.NAMESPACE_OID, f"{transcript_id}:{content_hash}:{chunk_index}"))


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class IngestionService:
    def __init__(
        self,
        helper_config: HelperConfig,
        transcript_client: TranscriptClientInterface,
        rag_client: RAGClientInterface,
        vectorizer: Vectorizer,
        settings: PipelineSettings | None = None,
        lock: IngestionLock | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._transcript_client = transcript_client
        self._rag_client = rag_client
        self._vectorizer = vectorizer
        self._settings = settings or helper_config.get_pipeline_settings()
        self._chunker = TextChunker(self._settings.chunk_size, self._settings.chunk_overlap)
        self._lock = lock or IngestionLock()

    ##########################################
    ############### GENERATE #################
    ##########################################

    async def generate(self, transcript_id: str) -> IngestionOutcome:
        """Ingest one transcript. Never raises; failures become error outcomes.

        Returns:
            IngestionOutcome: generated, skipped (in-progress / already-embedded) or error.
        """
        if not self._lock.try_acquire(transcript_id):
            self.logging.info("Transcript %s is already being ingested. Skipping.", transcript_id)
            return IngestionOutcome(
                transcript_id=transcript_id,
                status=IngestionStatus.SKIPPED,
                reason="in-progress",
                message="Embeddings already being generated for this transcript",
            )
        try:
            outcome = await self._generate_locked(transcript_id)
        except TranscriptPipelineError as e:
            self.logging.error("Ingestion of transcript %s failed (%s): %s", transcript_id, e.kind, e.message)
            outcome = IngestionOutcome(transcript_id=transcript_id, status=IngestionStatus.ERROR, reason=e.kind, message=e.message)
        except Exception as e:
            self.logging.exception("Unexpected error while ingesting transcript %s: %s", transcript_id, e)
            outcome = IngestionOutcome(transcript_id=transcript_id, status=IngestionStatus.ERROR, reason="internal-error", message=str(e))
        finally:
            self._lock.release(transcript_id)
        return outcome

    async def _generate_locked(self, transcript_id: str) -> IngestionOutcome:
        transcript = await self._transcript_client.do_find_by_id(transcript_id)
        if transcript is None:
            raise NotFoundError(transcript_id)

        text = normalize_transcript(transcript.transcript_data)
        content_hash = fingerprint(text)

        if await self._rag_client.do_is_current(transcript_id, content_hash):
            self.logging.info("Transcript %s already embedded (hash %s). Skipping.", transcript_id, content_hash)
            return IngestionOutcome(
                transcript_id=transcript_id,
                status=IngestionStatus.SKIPPED,
                reason="already-embedded",
                message="Embeddings already exist",
            )

        if self._settings.ingest_mode == "averaged":
            chunks = [text]
            vectors = [await self._vectorizer.embed_averaged(text)]
        else:
            chunks = list(self._chunker.chunk(text))
            if not chunks:
                raise NoContentError("Transcript produced no chunks.")
            vectors = await self._vectorizer.embed_batch(chunks)

        created_at = _now_iso()
        points = self._build_points(transcript, chunks, vectors, content_hash, created_at)

        # new version first, then drop every other version of this transcript
        await self._rag_client.do_upsert_chunks(points)
        await self._rag_client.do_delete_transcript_chunks(transcript_id, keep_content_hash=content_hash)

        previous = transcript.embedding_metadata
        metadata = EmbeddingMetadata(
            model=self._vectorizer.get_model_name(),
            mode=self._settings.ingest_mode,
            generated_at=previous.generated_at if previous else created_at,
            last_updated=created_at,
            content_hash=content_hash,
            content_length=len(text),
            chunk_count=len(points),
        )
        await self._transcript_client.do_update_embedding_metadata(transcript_id, metadata)

        self.logging.info(
            "Generated %d chunks for transcript %s (%d characters, dim %d).",
            len(points), transcript_id, len(text), len(vectors[0]), color="green",
        )
        return IngestionOutcome(
            transcript_id=transcript_id,
            status=IngestionStatus.GENERATED,
            message="Embeddings generated successfully",
            chunk_count=len(points),
            embedding_dimensions=len(vectors[0]),
            content_length=len(text),
        )

    def _build_points(
        self,
        transcript: Transcript,
        chunks: list[str],
        vectors: list[list[float]],
        content_hash: str,
        created_at: str,
    ) -> list[ChunkPoint]:
        model = self._vectorizer.get_model_name()
        return [
            ChunkPoint(
                id=_make_point_id(transcript.id, content_hash, chunk_index),
                vector=vector,
                payload=ChunkPayload(
                    transcript_id=transcript.id,
                    meeting_id=transcript.meeting_id,
                    date=transcript.date,
                    chunk_index=chunk_index,
                    chunk_total=len(chunks),
                    chunk_text=chunk,
                    content_hash=content_hash,
                    embed_model=model,
                    created_at=created_at,
                ),
            )
            for chunk_index, (chunk, vector) in enumerate(zip(chunks, vectors))
        ]

    ##########################################
    ################# BATCH ##################
    ##########################################

    async def generate_many(self, transcript_ids: list[str], concurrent: bool = False) -> IngestionSummary:
        """Ingest several transcripts and report per-ID outcomes plus counts.

        Sequential runs pause INGEST_DOC_DELAY_MS between transcripts;
        concurrent runs are bounded by INGEST_CONCURRENCY.
        """
        if concurrent:
            sem = asyncio.Semaphore(self._settings.ingest_concurrency)

            async def _bounded(transcript_id: str) -> IngestionOutcome:
                async with sem:
                    return await self.generate(transcript_id)

            results = list(await asyncio.gather(*[_bounded(transcript_id) for transcript_id in transcript_ids]))
        else:
            delay = self._settings.ingest_doc_delay_ms / 1000
            results = []
            for position, transcript_id in enumerate(transcript_ids):
                if position > 0 and delay > 0:
                    await asyncio.sleep(delay)
                results.append(await self.generate(transcript_id))

        counts = IngestionCounts(
            processed=len(results),
            generated=sum(1 for r in results if r.status == IngestionStatus.GENERATED),
            skipped=sum(1 for r in results if r.status == IngestionStatus.SKIPPED),
            errors=sum(1 for r in results if r.status == IngestionStatus.ERROR),
        )
        self.logging.info(
            "Ingestion batch done: %d processed, %d generated, %d skipped, %d errors.",
            counts.processed, counts.generated, counts.skipped, counts.errors,
        )
        return IngestionSummary(summary=counts, results=results)

    ##########################################
    ################# STATUS #################
    ##########################################

    async def get_status(self, transcript_ids: list[str]) -> EmbeddingStatusReport:
        """Embedding readiness of the given transcripts. Unknown IDs are left out."""
        transcripts = await self._transcript_client.do_list_eligible(transcript_ids)
        statuses: list[TranscriptEmbeddingStatus] = []
        for transcript in transcripts:
            statuses.append(
                TranscriptEmbeddingStatus(
                    transcript_id=transcript.id,
                    meeting_id=transcript.meeting_id,
                    has_embedding=await self._rag_client.do_exists_for_transcript(transcript.id),
                    embedding_metadata=transcript.embedding_metadata,
                    content_length=self._content_length(transcript),
                )
            )
        embedded = sum(1 for s in statuses if s.has_embedding)
        return EmbeddingStatusReport(
            status="ready" if embedded == len(statuses) else "partial",
            total_transcripts=len(statuses),
            embedded_transcripts=embedded,
            transcripts=statuses,
        )

    def _content_length(self, transcript: Transcript) -> int:
        if transcript.embedding_metadata:
            return transcript.embedding_metadata.content_length
        try:
            return len(normalize_transcript(transcript.transcript_data))
        except NoContentError:
            return 0
