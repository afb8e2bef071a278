"""
Unit tests for client selection, the OpenAI-compatible adapters and the transcript stores.
"""

import httpx
import pytest

from shared.clients.ClientManager import ClientManager
from shared.clients.embed.openai.EmbedClientOpenai import EmbedClientOpenai
from shared.clients.llm.openai.LLMClientOpenai import LLMClientOpenai
from shared.clients.rag.memory.RAGClientMemory import RAGClientMemory
from shared.clients.transcript.http.TranscriptClientHttp import TranscriptClientHttp
from shared.clients.transcript.memory.TranscriptClientMemory import TranscriptClientMemory
from shared.models.transcript import EmbeddingMetadata


def test_manager_resolves_engine_from_env(monkeypatch, helper_config):
    monkeypatch.setenv("RAG_ENGINE", "memory")
    monkeypatch.setenv("TRANSCRIPT_ENGINE", "Memory")

    assert isinstance(ClientManager(helper_config, "rag", "RAG").get_client(), RAGClientMemory)
    assert isinstance(ClientManager(helper_config, "transcript", "Transcript").get_client(), TranscriptClientMemory)


def test_manager_rejects_unknown_engine(monkeypatch, helper_config):
    monkeypatch.setenv("RAG_ENGINE", "nosuchdb")

    with pytest.raises(ValueError):
        ClientManager(helper_config, "rag", "RAG")


def test_manager_requires_engine(monkeypatch, helper_config):
    monkeypatch.delenv("LLM_ENGINE", raising=False)

    with pytest.raises(ValueError):
        ClientManager(helper_config, "llm", "LLM")


def test_openai_embeddings_are_ordered_by_index(helper_config):
    client = EmbedClientOpenai(helper_config)

    vectors = client.extract_embeddings_from_response({
        "data": [{"index": 1, "embedding": [0.0, 1.0]}, {"index": 0, "embedding": [1.0, 0.0]}],
    })

    assert vectors == [[1.0, 0.0], [0.0, 1.0]]
    assert client.get_model_name() == "text-embedding-ada-002"


def test_openai_embeddings_reject_empty_response(helper_config):
    with pytest.raises(ValueError):
        EmbedClientOpenai(helper_config).extract_embeddings_from_response({"data": []})


def test_openai_chat_reply_extraction(helper_config):
    client = LLMClientOpenai(helper_config)

    assert client.extract_chat_response({"choices": [{"message": {"content": "hello"}}]}) == "hello"
    with pytest.raises(ValueError):
        client.extract_chat_response({"choices": []})


async def test_memory_transcript_store_seeds_from_file(monkeypatch, helper_config, tmp_path):
    seed = tmp_path / "transcripts.json"
    seed.write_text('[{"id": "t1", "date": "2025-09-15", "transcript_data": "[]"}]', encoding="utf-8")
    monkeypatch.setenv("TRANSCRIPT_MEMORY_SEED_FILE", str(seed))
    client = TranscriptClientMemory(helper_config)

    await client.boot()

    assert (await client.do_find_by_id("t1")).date == "2025-09-15"
    assert await client.do_find_by_id("t2") is None


async def test_http_transcript_store_encodes_ids_in_paths(monkeypatch, helper_config):
    monkeypatch.setenv("TRANSCRIPT_HTTP_BASE_URL", "http://transcripts:8080")
    paths: list[bytes] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.raw_path)
        return httpx.Response(404 if request.method == "GET" else 200, json={})

    client = TranscriptClientHttp(helper_config)
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))

    assert await client.do_find_by_id("x/embedding") is None
    await client.do_update_embedding_metadata(
        "a b/c",
        EmbeddingMetadata(
            model="text-embedding-ada-002",
            generated_at="2025-09-15T10:00:00+00:00",
            last_updated="2025-09-15T10:00:00+00:00",
            content_hash="0" * 16,
            content_length=12,
            chunk_count=1,
        ),
    )

    assert paths == [b"/transcripts/x%2Fembedding", b"/transcripts/a%20b%2Fc/embedding"]
