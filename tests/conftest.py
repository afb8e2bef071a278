"""
Pytest configuration and shared fixtures.

Provides a deterministic fake embedding backend, in-memory transcript and
chunk stores, and factories for transcripts and stored chunks.
"""

import asyncio
import json
import logging
import re
import uuid
import zlib

import pytest

from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.rag.memory.RAGClientMemory import RAGClientMemory
from shared.clients.rag.models.ChunkPayload import ChunkPayload
from shared.clients.rag.models.ChunkPoint import ChunkPoint
from shared.clients.transcript.memory.TranscriptClientMemory import TranscriptClientMemory
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import ColorLogger
from shared.models.config import EnvConfig, PipelineSettings
from shared.models.transcript import Transcript
from services.transcript_ingest.IngestionLock import IngestionLock
from services.transcript_ingest.IngestionService import IngestionService
from services.transcript_ingest.Vectorizer import Vectorizer
from services.transcript_retrieval.FusionService import FusionService
from services.transcript_retrieval.PatternSearch import PatternSearch

FAKE_DIMENSIONS = 16


def fake_vector(text: str) -> list[float]:
    """Bag-of-words vector: each token increments one crc32-selected component."""
    vector = [0.0] * FAKE_DIMENSIONS
    for token in re.findall(r"\w+", text.lower()):
        vector[zlib.crc32(token.encode("utf-8")) % FAKE_DIMENSIONS] += 1.0
    return vector


class FakeEmbedClient(EmbedClientInterface):
    """Embedding backend that never leaves the process.

    calls records every embedded text. Texts listed in fail_on raise; when
    gate is set, every call waits for it first.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self.gate: asyncio.Event | None = None

    def _get_engine_name(self) -> str:
        return "Fake"

    def _get_default_model(self) -> str:
        return "fake-embedding"

    def _get_required_config(self) -> list[EnvConfig]:
        return []

    def _get_auth_header(self) -> dict:
        return {}

    def _get_base_url(self) -> str:
        return "memory://"

    def _get_endpoint_healthcheck(self) -> str:
        return ""

    def get_endpoint_embedding(self) -> str:
        return ""

    def get_embed_payload(self, texts: list[str]) -> dict:
        return {"input": texts}

    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        return response_data["embeddings"]

    async def do_embed(self, texts: list[str] | str) -> list[list[float]]:
        texts = [texts] if isinstance(texts, str) else texts
        if self.gate is not None:
            await self.gate.wait()
        self.calls.extend(texts)
        for text in texts:
            if text in self.fail_on:
                raise RuntimeError(f"upstream rejected input: {text[:20]}")
        return [fake_vector(text) for text in texts]


# -------------------------------------------------------------- #
# Fixtures
# -------------------------------------------------------------- #


@pytest.fixture
def helper_config() -> HelperConfig:
    return HelperConfig(logger=ColorLogger(logging.getLogger("tests")))


@pytest.fixture
def settings() -> PipelineSettings:
    return PipelineSettings(
        chunk_size=200,
        chunk_overlap=40,
        embed_batch_delay_ms=0,
        ingest_doc_delay_ms=0,
        retrieval_timeout=5.0,
    )


@pytest.fixture
def embed_client(helper_config) -> FakeEmbedClient:
    return FakeEmbedClient(helper_config)


@pytest.fixture
def rag_client(helper_config) -> RAGClientMemory:
    return RAGClientMemory(helper_config)


@pytest.fixture
def transcript_client(helper_config) -> TranscriptClientMemory:
    return TranscriptClientMemory(helper_config)


@pytest.fixture
def vectorizer(helper_config, embed_client, settings) -> Vectorizer:
    return Vectorizer(helper_config, embed_client, settings)


@pytest.fixture
def ingestion_lock() -> IngestionLock:
    return IngestionLock()


@pytest.fixture
def ingestion_service(helper_config, transcript_client, rag_client, vectorizer, settings, ingestion_lock) -> IngestionService:
    return IngestionService(
        helper_config=helper_config,
        transcript_client=transcript_client,
        rag_client=rag_client,
        vectorizer=vectorizer,
        settings=settings,
        lock=ingestion_lock,
    )


@pytest.fixture
def pattern_search(helper_config, rag_client, settings) -> PatternSearch:
    return PatternSearch(helper_config, rag_client, settings)


@pytest.fixture
def fusion_service(helper_config, rag_client, vectorizer, pattern_search, settings) -> FusionService:
    return FusionService(helper_config, rag_client, vectorizer, pattern_search=pattern_search, settings=settings)


@pytest.fixture
def make_transcript(transcript_client):
    """Create a transcript from (speaker, text) turns and add it to the store."""

    def _make(transcript_id: str, turns: list[tuple[str, str]], date: str = "2025-09-15", meeting_id: str | None = None, **extra) -> Transcript:
        transcript = Transcript(
            id=transcript_id,
            meeting_id=meeting_id or f"meeting-{transcript_id}",
            date=date,
            transcript_data=json.dumps([{"speaker": speaker, "text": text} for speaker, text in turns]),
            **extra,
        )
        transcript_client.add(transcript)
        return transcript

    return _make


@pytest.fixture
def add_chunk(rag_client):
    """Store a single chunk directly, bypassing ingestion."""

    async def _add(transcript_id: str, text: str, date: str = "2025-09-15", chunk_index: int = 0, chunk_total: int = 1, content_hash: str = "0" * 16) -> ChunkPoint:
        vector = fake_vector(text)
        if not any(vector):
            vector[0] = 1.0
        point = ChunkPoint(
            id=str(uuid.uuid5(uuid.NAMESPACE_OID, f"{transcript_id}:{content_hash}:{chunk_index}")),
            vector=vector,
            payload=ChunkPayload(
                transcript_id=transcript_id,
                meeting_id=f"meeting-{transcript_id}",
                date=date,
                chunk_index=chunk_index,
                chunk_total=chunk_total,
                chunk_text=text,
                content_hash=content_hash,
                embed_model="fake-embedding",
                created_at="2025-09-15T10:00:00+00:00",
            ),
        )
        await rag_client.do_upsert_chunks([point])
        return point

    return _add
