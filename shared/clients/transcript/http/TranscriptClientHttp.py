from urllib.parse import quote

from shared.clients.transcript.TranscriptClientInterface import TranscriptClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.transcript import EmbeddingMetadata, Transcript


class TranscriptClientHttp(TranscriptClientInterface):
    """Transcript store reached over a small REST API.

    GET   /transcripts/{id}            -> transcript object, 404 if unknown
    GET   /transcripts?ids=a,b         -> {"results": [...]}
    PATCH /transcripts/{id}/embedding  -> stores embedding metadata
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Http"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/health"

    def _get_endpoint_transcripts(self) -> str:
        return "/transcripts"

    def _get_endpoint_transcript(self, transcript_id: str) -> str:
        return f"/transcripts/{quote(transcript_id, safe='')}"

    def _get_endpoint_embedding(self, transcript_id: str) -> str:
        return f"/transcripts/{quote(transcript_id, safe='')}/embedding"

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_find_by_id(self, transcript_id: str) -> Transcript | None:
        response = await self.do_request(method="GET", endpoint=self._get_endpoint_transcript(transcript_id))
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            self.logging.error("Fetching transcript %s failed with status %d.", transcript_id, response.status_code)
            raise Exception(f"Fetching transcript {transcript_id} failed with status {response.status_code}")
        return Transcript(**response.json())

    async def do_list_eligible(self, transcript_ids: list[str]) -> list[Transcript]:
        if not transcript_ids:
            return []
        response = await self.do_request(
            method="GET",
            endpoint=self._get_endpoint_transcripts(),
            params={"ids": ",".join(transcript_ids)},
            raise_on_error=True,
        )
        found = {item["id"]: Transcript(**item) for item in response.json().get("results", [])}
        return [found[transcript_id] for transcript_id in transcript_ids if transcript_id in found]

    async def do_update_embedding_metadata(self, transcript_id: str, metadata: EmbeddingMetadata) -> None:
        await self.do_request(
            method="PATCH",
            endpoint=self._get_endpoint_embedding(transcript_id),
            json={"embedding_metadata": metadata.model_dump(), "embeddings": None},
            raise_on_error=True,
        )
