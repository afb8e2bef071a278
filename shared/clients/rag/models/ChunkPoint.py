"""Models for chunks read back from a RAG backend."""

from pydantic import BaseModel

from shared.clients.rag.models.ChunkPayload import ChunkPayload


class ChunkPoint(BaseModel):
    """A persisted chunk: point ID, payload and (optionally) its vector."""

    id: str
    payload: ChunkPayload
    vector: list[float] | None = None


class ScoredChunk(BaseModel):
    """A nearest-neighbour result with its cosine similarity."""

    chunk: ChunkPoint
    score: float


class ScrollResult(BaseModel):
    """Structured output of a single scroll page or a fully-collected scroll.

    Attributes:
        result:           Chunks returned by the scroll.
        next_page_offset: Cursor for the next page, or None when all pages
                          have been consumed. Always None on results returned
                          by do_scroll_all().
    """

    result: list[ChunkPoint]
    next_page_offset: str | None = None
