import json

from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.clients.rag.models.ChunkFilter import ChunkFilter
from shared.clients.rag.models.ChunkPayload import ChunkPayload
from shared.clients.rag.models.ChunkPoint import ChunkPoint, ScoredChunk, ScrollResult
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class RAGClientQdrant(RAGClientInterface):
    """Qdrant REST implementation of the chunk store and similarity index."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")
        self._collection_name = self.get_config_val("COLLECTION", default="transcript_chunks", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Qdrant"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
            EnvConfig(env_key="COLLECTION", val_type="string", default="transcript_chunks"),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"api-key": f"{self._api_key}"}
        return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/healthz"

    def _get_endpoint_collection(self) -> str:
        return f"/collections/{self._collection_name}"

    def _get_endpoint_check_collection_existence(self) -> str:
        return f"/collections/{self._collection_name}/exists"

    def _get_endpoint_points(self) -> str:
        return f"/collections/{self._collection_name}/points?wait=true"

    def _get_endpoint_delete_points(self) -> str:
        return f"/collections/{self._collection_name}/points/delete?wait=true"

    def _get_endpoint_scroll(self) -> str:
        return f"/collections/{self._collection_name}/points/scroll"

    def _get_endpoint_search(self) -> str:
        return f"/collections/{self._collection_name}/points/search"

    def _get_endpoint_count(self) -> str:
        return f"/collections/{self._collection_name}/points/count"

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    def build_filter(self, chunk_filter: ChunkFilter) -> dict:
        qdrant_filter: dict = {
            "must": [{"key": "transcript_id", "match": {"any": chunk_filter.transcript_ids}}],
        }
        if chunk_filter.exclude_content_hash is not None:
            qdrant_filter["must_not"] = [
                {"key": "content_hash", "match": {"value": chunk_filter.exclude_content_hash}}
            ]
        return qdrant_filter

    def get_upsert_payload(self, points: list[ChunkPoint]) -> dict:
        return {
            "points": [
                {"id": point.id, "vector": point.vector, "payload": point.payload.model_dump()}
                for point in points
            ]
        }

    def get_scroll_payload(self, chunk_filter: ChunkFilter, limit: int, offset: str | None = None) -> dict:
        payload = {
            "filter": self.build_filter(chunk_filter),
            "limit": limit,
            "with_payload": True,
            "with_vector": False,
        }
        if offset is not None:
            payload["offset"] = offset
        return payload

    def get_search_payload(self, vector: list[float], chunk_filter: ChunkFilter, limit: int) -> dict:
        return {
            "vector": vector,
            "limit": limit,
            "with_payload": True,
            "filter": self.build_filter(chunk_filter),
        }

    def get_count_payload(self, chunk_filter: ChunkFilter) -> dict:
        return {"filter": self.build_filter(chunk_filter), "exact": True}

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _to_chunk_point(self, raw_point: dict) -> ChunkPoint:
        return ChunkPoint(
            id=str(raw_point.get("id")),
            payload=ChunkPayload(**(raw_point.get("payload") or {})),
            vector=raw_point.get("vector") or None,
        )

    def extract_scroll_content(self, raw_response: dict) -> ScrollResult:
        result = raw_response.get("result") or {}
        next_offset = result.get("next_page_offset")
        return ScrollResult(
            result=[self._to_chunk_point(point) for point in result.get("points", [])],
            next_page_offset=str(next_offset) if next_offset is not None else None,
        )

    def extract_search_content(self, raw_response: dict) -> list[ScoredChunk]:
        return [
            ScoredChunk(chunk=self._to_chunk_point(hit), score=float(hit.get("score", 0.0)))
            for hit in raw_response.get("result") or []
        ]

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_existence_check(self) -> bool:
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_check_collection_existence(), raise_on_error=True)
        return bool(resp.json().get("result", {}).get("exists"))

    async def do_create_collection(self, vector_size: int, distance: str = "Cosine") -> None:
        await self.do_request(
            method="PUT",
            json={"vectors": {"size": vector_size, "distance": distance}},
            endpoint=self._get_endpoint_collection(),
            raise_on_error=True,
        )
        self.logging.info("Qdrant collection %r created (size=%d, distance=%s).", self._collection_name, vector_size, distance)

    async def _upsert(self, points: list[ChunkPoint]) -> None:
        await self.do_request(
            method="PUT",
            content=json.dumps(self.get_upsert_payload(points)),
            endpoint=self._get_endpoint_points(),
            additional_headers={"Content-Type": "application/json"},
            raise_on_error=True,
        )

    async def _delete(self, chunk_filter: ChunkFilter) -> None:
        await self.do_request(
            method="POST",
            json={"filter": self.build_filter(chunk_filter)},
            endpoint=self._get_endpoint_delete_points(),
            raise_on_error=True,
        )

    async def _count(self, chunk_filter: ChunkFilter) -> int:
        resp = await self.do_request(
            method="POST",
            json=self.get_count_payload(chunk_filter),
            endpoint=self._get_endpoint_count(),
            raise_on_error=True,
        )
        return int(resp.json().get("result", {}).get("count", 0))

    async def _scroll(self, chunk_filter: ChunkFilter, limit: int, offset: str | None = None) -> ScrollResult:
        resp = await self.do_request(
            method="POST",
            json=self.get_scroll_payload(chunk_filter, limit, offset),
            endpoint=self._get_endpoint_scroll(),
            raise_on_error=True,
        )
        return self.extract_scroll_content(resp.json())

    async def _search(self, vector: list[float], chunk_filter: ChunkFilter, limit: int) -> list[ScoredChunk]:
        resp = await self.do_request(
            method="POST",
            json=self.get_search_payload(vector, chunk_filter, limit),
            endpoint=self._get_endpoint_search(),
            raise_on_error=True,
        )
        return self.extract_search_content(resp.json())
