"""Literal scanning of stored chunk text.

Two scanners share this class:

- the identifier scanner finds task identifiers such as "SP-123", "sp 45" or
  "SP789" (two-letter prefix, optional hyphen or space, digits; case-insensitive);
- the keyword scanner matches the significant terms of a free-text query.

Both only read chunks of the requested transcripts and give their hits a fixed
confidence. These constants order literal hits ahead of vector hits during
fusion; they are not probabilities and must not be compared with cosine scores.
"""

import re

from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.clients.rag.models.ChunkPoint import ChunkPoint
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import PipelineSettings
from shared.models.search import Provenance, QueryClassification, SearchHit

IDENTIFIER_SCORE = 0.95
KEYWORD_SCORE = 0.9
MAX_IDENTIFIER_HITS = 20
MAX_KEYWORD_HITS = 15
MIN_TERM_LENGTH = 4

# query vocabulary that means "task identifiers"
_IDENTIFIER_SYNONYMS = re.compile(r"\b(?:tasks?|tickets?|items?|work)\b", re.IGNORECASE)
# query vocabulary that asks for a per-meeting breakdown
_CROSS_DOCUMENT_PHRASES = re.compile(
    r"\b(?:each|every|separate(?:ly)?|individual(?:ly)?|respective(?:ly)?|per\s+meeting|all\s+(?:the\s+)?meetings)\b",
    re.IGNORECASE,
)
_TOKEN = re.compile(r"[a-z0-9]+(?:['-][a-z0-9]+)*")
_STOPWORDS = frozenset({
    "about", "also", "been", "could", "does", "from", "have", "into", "just", "more", "should",
    "that", "their", "them", "then", "there", "these", "they", "this", "what", "when", "where",
    "which", "while", "with", "were", "will", "would", "your",
})


class PatternSearch:
    def __init__(self, helper_config: HelperConfig, rag_client: RAGClientInterface, settings: PipelineSettings | None = None):
        self.logging = helper_config.get_logger()
        self._rag_client = rag_client
        settings = settings or helper_config.get_pipeline_settings()
        prefixes = "|".join(re.escape(prefix) for prefix in settings.identifier_prefixes)
        self._identifier_pattern = re.compile(rf"\b({prefixes})[- ]?(\d+)\b", re.IGNORECASE)

    ##########################################
    ############ CLASSIFICATION ##############
    ##########################################

    def find_identifiers(self, text: str) -> list[str]:
        """Every identifier occurrence in text, normalized to "PREFIX-digits", in order."""
        return [f"{m.group(1).upper()}-{m.group(2)}" for m in self._identifier_pattern.finditer(text)]

    def classify(self, query: str) -> QueryClassification:
        return QueryClassification(
            is_identifier_query=bool(_IDENTIFIER_SYNONYMS.search(query) or self._identifier_pattern.search(query)),
            is_cross_document_query=bool(_CROSS_DOCUMENT_PHRASES.search(query)),
        )

    @staticmethod
    def extract_terms(query: str) -> list[str]:
        """Lower-cased query tokens of at least MIN_TERM_LENGTH characters, deduplicated, stopwords removed."""
        terms: list[str] = []
        for token in _TOKEN.findall(query.lower()):
            if len(token) >= MIN_TERM_LENGTH and token not in _STOPWORDS and token not in terms:
                terms.append(token)
        return terms

    ##########################################
    ################ SCANNERS ################
    ##########################################

    async def identifier_search(self, query: str, transcript_ids: list[str]) -> list[SearchHit]:
        """Chunks containing task identifiers.

        If the query names identifiers itself, only chunks mentioning one of
        them are returned; otherwise every chunk with any identifier is.
        """
        wanted = set(self.find_identifiers(query))

        def _predicate(text: str) -> bool:
            found = self.find_identifiers(text)
            return bool(found) and (not wanted or not wanted.isdisjoint(found))

        chunks = await self._rag_client.do_find_chunks_matching(transcript_ids, _predicate)
        hits = [
            self._to_hit(chunk, IDENTIFIER_SCORE, Provenance.IDENTIFIER, self.find_identifiers(chunk.payload.chunk_text))
            for chunk in chunks[:MAX_IDENTIFIER_HITS]
        ]
        self.logging.debug("Identifier scan found %d of %d matching chunks.", len(hits), len(chunks))
        return hits

    async def keyword_search(self, query: str, transcript_ids: list[str], include_identifiers: bool | None = None) -> list[SearchHit]:
        """Chunks containing any significant query term.

        When the query is about tasks (or include_identifiers is set), the
        identifier scanner's hits are merged in front of the term hits.
        """
        if include_identifiers is None:
            include_identifiers = self.classify(query).is_identifier_query

        hits: list[SearchHit] = []
        if include_identifiers:
            hits.extend(await self.identifier_search(query, transcript_ids))

        terms = self.extract_terms(query)
        if terms:
            term_pattern = re.compile(r"\b(?:" + "|".join(re.escape(term) for term in terms) + r")", re.IGNORECASE)
            chunks = await self._rag_client.do_find_chunks_matching(transcript_ids, lambda text: bool(term_pattern.search(text)))
            seen = {hit.chunk_id for hit in hits}
            hits.extend(
                self._to_hit(chunk, KEYWORD_SCORE, Provenance.KEYWORD)
                for chunk in chunks
                if chunk.id not in seen
            )
        return hits[:MAX_KEYWORD_HITS]

    ##########################################
    ################# OTHER ##################
    ##########################################

    @staticmethod
    def _to_hit(chunk: ChunkPoint, score: float, provenance: Provenance, matches: list[str] | None = None) -> SearchHit:
        return SearchHit(
            chunk_id=chunk.id,
            transcript_id=chunk.payload.transcript_id,
            meeting_id=chunk.payload.meeting_id,
            date=chunk.payload.date,
            chunk_index=chunk.payload.chunk_index,
            text=chunk.payload.chunk_text,
            score=score,
            provenance=provenance,
            matches=matches or [],
        )
