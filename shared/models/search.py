"""Pydantic models for retrieval results."""

from enum import Enum

from pydantic import BaseModel, Field


class Provenance(str, Enum):
    """Retrieval strategy that produced a hit."""

    VECTOR = "vector"
    KEYWORD = "keyword"
    IDENTIFIER = "identifier"


class SearchHit(BaseModel):
    """A candidate chunk produced by one retrieval strategy.

    Scores are only comparable within one provenance: literal matches carry a
    fixed confidence, vector hits carry their cosine similarity.
    """

    chunk_id: str
    transcript_id: str
    meeting_id: str | None = None
    date: str
    chunk_index: int = 0
    text: str
    score: float = Field(ge=0.0, le=1.0)
    provenance: Provenance
    # identifier strings found in the chunk, in order of appearance
    matches: list[str] = []


class QueryClassification(BaseModel):
    """Flags derived from the user's question before retrieval starts."""

    is_identifier_query: bool = False
    is_cross_document_query: bool = False
