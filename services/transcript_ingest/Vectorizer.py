"""Embedding front-end used by ingestion and retrieval.

Wraps an EmbedClient with the pipeline's batching policy: one embedding call
per text, a configurable pause between calls, and failures reported with the
index of the offending input.
"""

import asyncio

from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.exceptions import EmbeddingFailureError
from shared.helper.HelperConfig import HelperConfig
from shared.helper.vector_math import average_vectors
from shared.models.config import PipelineSettings
from services.transcript_ingest.TextChunker import TextChunker


class Vectorizer:
    def __init__(self, helper_config: HelperConfig, embed_client: EmbedClientInterface, settings: PipelineSettings | None = None):
        self.logging = helper_config.get_logger()
        self._embed_client = embed_client
        self._settings = settings or helper_config.get_pipeline_settings()

    def get_model_name(self) -> str:
        return self._embed_client.get_model_name()

    async def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            EmbeddingFailureError: If the backend call fails (index 0).
        """
        return (await self.embed_batch([text]))[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed texts one call at a time, preserving order.

        Raises:
            EmbeddingFailureError: On the first failing input; earlier results
                                   are discarded rather than returned partially.
        """
        delay = self._settings.embed_batch_delay_ms / 1000
        vectors: list[list[float]] = []
        for index, text in enumerate(texts):
            if index > 0 and delay > 0:
                await asyncio.sleep(delay)
            try:
                vectors.append((await self._embed_client.do_embed(text))[0])
            except Exception as exc:
                self.logging.error("Embedding input %d of %d failed: %s", index, len(texts), exc)
                raise EmbeddingFailureError(index=index, cause=exc) from exc
        return vectors

    async def embed_averaged(self, text: str) -> list[float]:
        """Embed a whole document as one vector.

        Texts above EMBED_MODEL_MAX_CHARS are split into sub-chunks whose
        vectors are averaged component-wise.

        Raises:
            EmbeddingFailureError: If any sub-chunk fails to embed.
            DimensionMismatchError: If the sub-chunk vectors differ in length.
        """
        max_chars = self._settings.embed_model_max_chars
        if len(text) <= max_chars:
            return await self.embed(text)
        parts = list(TextChunker(chunk_size=max_chars, chunk_overlap=0).chunk(text))
        self.logging.debug("Averaging %d sub-chunk embeddings for a %d character text.", len(parts), len(text))
        return average_vectors(await self.embed_batch(parts))
