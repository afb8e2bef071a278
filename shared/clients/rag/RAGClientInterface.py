from abc import abstractmethod
from typing import Callable

from shared.clients.ClientInterface import ClientInterface
from shared.clients.rag.models.ChunkFilter import ChunkFilter
from shared.clients.rag.models.ChunkPoint import ChunkPoint, ScoredChunk, ScrollResult
from shared.helper.HelperConfig import HelperConfig

UPSERT_BATCH_SIZE = 100  # max points per upsert call
SCROLL_PAGE_SIZE = 256


class RAGClientInterface(ClientInterface):
    """Chunk store and similarity index.

    The public do_* methods implement the transcript-level operations used by
    ingestion and retrieval. Engines only implement the five storage
    primitives (_upsert, _delete, _count, _scroll, _search) plus collection
    management.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "rag"

    ##########################################
    ############### PRIMITIVES ###############
    ##########################################

    @abstractmethod
    async def do_existence_check(self) -> bool:
        """Check whether the target collection exists."""
        pass

    @abstractmethod
    async def do_create_collection(self, vector_size: int, distance: str = "Cosine") -> None:
        """Create the target collection for vectors of the given size."""
        pass

    @abstractmethod
    async def _upsert(self, points: list[ChunkPoint]) -> None:
        """Insert points, replacing points with the same ID."""
        pass

    @abstractmethod
    async def _delete(self, chunk_filter: ChunkFilter) -> None:
        """Delete every point matching the filter."""
        pass

    @abstractmethod
    async def _count(self, chunk_filter: ChunkFilter) -> int:
        """Count points matching the filter."""
        pass

    @abstractmethod
    async def _scroll(self, chunk_filter: ChunkFilter, limit: int, offset: str | None = None) -> ScrollResult:
        """Read one page of points matching the filter, without vectors."""
        pass

    @abstractmethod
    async def _search(self, vector: list[float], chunk_filter: ChunkFilter, limit: int) -> list[ScoredChunk]:
        """Nearest neighbours of vector among points matching the filter, by cosine similarity."""
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_upsert_chunks(self, points: list[ChunkPoint]) -> None:
        """Persist chunks with their vectors, in batches of UPSERT_BATCH_SIZE.

        Raises:
            ValueError: If a point carries no vector.
        """
        for point in points:
            if not point.vector:
                raise ValueError(f"Chunk {point.id} has no vector; every stored chunk needs exactly one.")
        for batch_start in range(0, len(points), UPSERT_BATCH_SIZE):
            await self._upsert(points[batch_start: batch_start + UPSERT_BATCH_SIZE])

    async def do_delete_transcript_chunks(self, transcript_id: str, keep_content_hash: str | None = None) -> None:
        """Delete the chunks of a transcript. Safe to call when none exist.

        Args:
            transcript_id (str): The owning transcript.
            keep_content_hash (str | None): Chunks carrying this hash survive;
                                            everything else of the transcript is removed.
        """
        await self._delete(ChunkFilter(transcript_ids=[transcript_id], exclude_content_hash=keep_content_hash))

    async def do_count_transcript_chunks(self, transcript_id: str) -> int:
        return await self._count(ChunkFilter(transcript_ids=[transcript_id]))

    async def do_exists_for_transcript(self, transcript_id: str) -> bool:
        return await self.do_count_transcript_chunks(transcript_id) > 0

    async def do_fetch_content_hash(self, transcript_id: str) -> str | None:
        """Return the content hash recorded on the transcript's stored chunks, if any."""
        page = await self._scroll(ChunkFilter(transcript_ids=[transcript_id]), limit=1)
        if not page.result:
            return None
        return page.result[0].payload.content_hash

    async def do_is_current(self, transcript_id: str, content_hash: str) -> bool:
        """True if the stored chunks are one complete set built from content_hash.

        A partial set (interrupted run) or leftovers of an older version make
        the transcript stale.
        """
        page = await self._scroll(ChunkFilter(transcript_ids=[transcript_id]), limit=1)
        if not page.result or page.result[0].payload.content_hash != content_hash:
            return False
        return await self.do_count_transcript_chunks(transcript_id) == page.result[0].payload.chunk_total

    async def do_scroll_all(self, transcript_ids: list[str]) -> list[ChunkPoint]:
        """Read every chunk of the given transcripts, paginating automatically.

        Returns:
            list[ChunkPoint]: Chunks ordered by the position of their transcript
                              in transcript_ids, then by chunk_index.
        """
        if not transcript_ids:
            return []
        chunk_filter = ChunkFilter(transcript_ids=transcript_ids)
        points: list[ChunkPoint] = []
        offset: str | None = None
        while True:
            page = await self._scroll(chunk_filter, limit=SCROLL_PAGE_SIZE, offset=offset)
            points.extend(page.result)
            offset = page.next_page_offset
            if not offset:
                break
        self.logging.debug(
            "Scrolled %d chunks for %d transcripts from %s.", len(points), len(transcript_ids), self.get_engine_name()
        )
        order = {transcript_id: position for position, transcript_id in enumerate(transcript_ids)}
        return sorted(
            (p for p in points if p.payload.transcript_id in order),
            key=lambda p: (order[p.payload.transcript_id], p.payload.chunk_index),
        )

    async def do_find_chunks_matching(self, transcript_ids: list[str], predicate: Callable[[str], bool]) -> list[ChunkPoint]:
        """Chunks of the given transcripts whose text satisfies predicate."""
        return [p for p in await self.do_scroll_all(transcript_ids) if predicate(p.payload.chunk_text)]

    async def do_search(self, vector: list[float], transcript_ids: list[str], k: int) -> list[ScoredChunk]:
        """Nearest-neighbour query restricted to the given transcripts.

        Results are ordered by score, highest first; equal scores keep the
        backend's order. Any hit outside transcript_ids is dropped.
        """
        if not transcript_ids or k <= 0:
            return []
        allowed = set(transcript_ids)
        hits = await self._search(vector, ChunkFilter(transcript_ids=transcript_ids), limit=k)
        filtered = [hit for hit in hits if hit.chunk.payload.transcript_id in allowed]
        if len(filtered) != len(hits):
            self.logging.warning(
                "%s returned %d hits outside the requested transcripts; dropped.",
                self.get_engine_name(), len(hits) - len(filtered),
            )
        return sorted(filtered, key=lambda hit: -hit.score)[:k]
