import httpx

from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.clients.rag.models.ChunkFilter import ChunkFilter
from shared.clients.rag.models.ChunkPoint import ChunkPoint, ScoredChunk, ScrollResult
from shared.helper.HelperConfig import HelperConfig
from shared.helper.vector_math import cosine_similarity
from shared.models.config import EnvConfig


class RAGClientMemory(RAGClientInterface):
    """In-process chunk store for local runs and tests.

    Points live in an insertion-ordered dict; a replaced point keeps its
    original position. Similarity is computed directly with cosine_similarity,
    and equal scores keep insertion order.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._points: dict[str, ChunkPoint] = {}
        self._collection_exists = False

    ##########################################
    ################ GETTER ##################
    ##########################################

    def _get_engine_name(self) -> str:
        return "Memory"

    def _get_required_config(self) -> list[EnvConfig]:
        return []

    def _get_auth_header(self) -> dict:
        return {}

    def _get_base_url(self) -> str:
        return "memory://"

    def _get_endpoint_healthcheck(self) -> str:
        return ""

    def _matches(self, point: ChunkPoint, chunk_filter: ChunkFilter) -> bool:
        if point.payload.transcript_id not in chunk_filter.transcript_ids:
            return False
        if chunk_filter.exclude_content_hash is not None and point.payload.content_hash == chunk_filter.exclude_content_hash:
            return False
        return True

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self) -> None:
        self.logging.debug("In-memory RAG store ready (%d points).", len(self._points))

    async def close(self) -> None:
        return None

    async def do_healthcheck(self) -> httpx.Response:
        return httpx.Response(200, json={"status": "ok", "points": len(self._points)})

    ##########################################
    ############### PRIMITIVES ###############
    ##########################################

    async def do_existence_check(self) -> bool:
        return self._collection_exists

    async def do_create_collection(self, vector_size: int, distance: str = "Cosine") -> None:
        self._collection_exists = True

    async def _upsert(self, points: list[ChunkPoint]) -> None:
        for point in points:
            self._points[point.id] = point.model_copy(deep=True)

    async def _delete(self, chunk_filter: ChunkFilter) -> None:
        for point_id in [pid for pid, point in self._points.items() if self._matches(point, chunk_filter)]:
            del self._points[point_id]

    async def _count(self, chunk_filter: ChunkFilter) -> int:
        return sum(1 for point in self._points.values() if self._matches(point, chunk_filter))

    async def _scroll(self, chunk_filter: ChunkFilter, limit: int, offset: str | None = None) -> ScrollResult:
        matching = [point for point in self._points.values() if self._matches(point, chunk_filter)]
        start = int(offset) if offset else 0
        page = matching[start: start + limit]
        next_offset = str(start + limit) if start + limit < len(matching) else None
        return ScrollResult(
            result=[point.model_copy(update={"vector": None}) for point in page],
            next_page_offset=next_offset,
        )

    async def _search(self, vector: list[float], chunk_filter: ChunkFilter, limit: int) -> list[ScoredChunk]:
        scored = [
            ScoredChunk(chunk=point.model_copy(update={"vector": None}), score=cosine_similarity(vector, point.vector))
            for point in self._points.values()
            if self._matches(point, chunk_filter)
        ]
        # sorted() is stable: equal scores keep insertion order
        return sorted(scored, key=lambda hit: -hit.score)[:limit]
