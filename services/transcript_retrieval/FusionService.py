"""Fusion retrieval.

Runs vector search, keyword scan and (for task questions) the identifier scan
concurrently, then merges their hits by strategy priority, drops duplicate
texts and caps the result.
"""

import asyncio
from typing import Awaitable

from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.exceptions import RetrievalTimeoutError, RetrievalUnavailableError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import PipelineSettings
from shared.models.search import Provenance, QueryClassification, SearchHit
from services.transcript_ingest.Vectorizer import Vectorizer
from services.transcript_retrieval.PatternSearch import PatternSearch


class FusionService:
    def __init__(
        self,
        helper_config: HelperConfig,
        rag_client: RAGClientInterface,
        vectorizer: Vectorizer,
        pattern_search: PatternSearch | None = None,
        settings: PipelineSettings | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._rag_client = rag_client
        self._vectorizer = vectorizer
        self._settings = settings or helper_config.get_pipeline_settings()
        self._pattern_search = pattern_search or PatternSearch(helper_config, rag_client, self._settings)

    ##########################################
    ############### RETRIEVE #################
    ##########################################

    async def retrieve(self, query: str, transcript_ids: list[str], max_results: int | None = None) -> list[SearchHit]:
        """Fused, deduplicated hits for query, restricted to transcript_ids.

        Args:
            query (str): The user's question.
            transcript_ids (list[str]): Transcripts the hits may come from.
            max_results (int | None): Result cap; defaults to RETRIEVAL_MAX_RESULTS,
                                      or RETRIEVAL_MAX_RESULTS_CROSS for per-meeting questions.

        Returns:
            list[SearchHit]: Hits in priority order (never re-sorted by score).

        Raises:
            RetrievalUnavailableError: If every launched strategy failed.
            RetrievalTimeoutError: If the whole retrieval exceeded RETRIEVAL_TIMEOUT.
        """
        try:
            return await asyncio.wait_for(
                self._retrieve(query, transcript_ids, max_results),
                timeout=self._settings.retrieval_timeout,
            )
        except asyncio.TimeoutError:
            self.logging.error("Retrieval timed out after %.1fs for query %r.", self._settings.retrieval_timeout, query)
            raise RetrievalTimeoutError(
                f"Retrieval exceeded {self._settings.retrieval_timeout}s",
                {"timeout": self._settings.retrieval_timeout},
            )

    async def _retrieve(self, query: str, transcript_ids: list[str], max_results: int | None) -> list[SearchHit]:
        if not transcript_ids:
            return []
        classification = self._pattern_search.classify(query)
        cross = classification.is_cross_document_query
        k = self._settings.vector_k_cross if cross else self._settings.vector_k
        limit = max_results or (self._settings.max_results_cross if cross else self._settings.max_results)

        strategies: dict[Provenance, Awaitable[list[SearchHit]]] = {
            Provenance.VECTOR: self.vector_search(query, transcript_ids, k),
            # identifier hits come from their own strategy
            Provenance.KEYWORD: self._pattern_search.keyword_search(query, transcript_ids, include_identifiers=False),
        }
        if classification.is_identifier_query:
            strategies[Provenance.IDENTIFIER] = self._pattern_search.identifier_search(query, transcript_ids)

        outcomes = await asyncio.gather(*strategies.values(), return_exceptions=True)

        results: dict[Provenance, list[SearchHit]] = {}
        for provenance, outcome in zip(strategies.keys(), outcomes):
            if isinstance(outcome, Exception):
                self.logging.warning("%s search failed, continuing without it: %s", provenance.value, outcome, color="yellow")
                continue
            results[provenance] = outcome
        if not results:
            raise RetrievalUnavailableError(
                "All retrieval strategies failed.",
                {"strategies": [p.value for p in strategies]},
            )

        fused = self.fuse(results, classification, transcript_ids, limit)
        self.logging.info(
            "Retrieved %d hits (%s) for %d transcripts.",
            len(fused),
            ", ".join(f"{p.value}={len(h)}" for p, h in results.items()),
            len(transcript_ids),
        )
        return fused

    async def vector_search(self, query: str, transcript_ids: list[str], k: int) -> list[SearchHit]:
        vector = await self._vectorizer.embed(query)
        scored = await self._rag_client.do_search(vector, transcript_ids, k)
        return [
            SearchHit(
                chunk_id=hit.chunk.id,
                transcript_id=hit.chunk.payload.transcript_id,
                meeting_id=hit.chunk.payload.meeting_id,
                date=hit.chunk.payload.date,
                chunk_index=hit.chunk.payload.chunk_index,
                text=hit.chunk.payload.chunk_text,
                score=min(1.0, max(0.0, hit.score)),
                provenance=Provenance.VECTOR,
            )
            for hit in scored
        ]

    ##########################################
    ################# MERGE ##################
    ##########################################

    @staticmethod
    def priority_order(classification: QueryClassification) -> list[Provenance]:
        if classification.is_identifier_query:
            return [Provenance.IDENTIFIER, Provenance.KEYWORD, Provenance.VECTOR]
        return [Provenance.KEYWORD, Provenance.VECTOR]

    def fuse(
        self,
        results: dict[Provenance, list[SearchHit]],
        classification: QueryClassification,
        transcript_ids: list[str],
        limit: int,
    ) -> list[SearchHit]:
        """Merge strategy results by priority, keep the first hit per text, cap at limit."""
        allowed = set(transcript_ids)
        seen_texts: set[str] = set()
        fused: list[SearchHit] = []
        for provenance in self.priority_order(classification):
            for hit in results.get(provenance, []):
                if hit.transcript_id not in allowed or hit.text in seen_texts:
                    continue
                seen_texts.add(hit.text)
                fused.append(hit)
        return fused[:limit]
