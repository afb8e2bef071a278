import json

import httpx

from shared.clients.transcript.TranscriptClientInterface import TranscriptClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.transcript import EmbeddingMetadata, Transcript


class TranscriptClientMemory(TranscriptClientInterface):
    """In-process transcript store.

    Optionally seeded at boot from TRANSCRIPT_MEMORY_SEED_FILE, a JSON list of
    transcript objects.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._seed_file = self.get_config_val("SEED_FILE", default="", val_type="string")
        self._transcripts: dict[str, Transcript] = {}

    ##########################################
    ################ GETTER ##################
    ##########################################

    def _get_engine_name(self) -> str:
        return "Memory"

    def _get_required_config(self) -> list[EnvConfig]:
        return [EnvConfig(env_key="SEED_FILE", val_type="string", default="")]

    def _get_auth_header(self) -> dict:
        return {}

    def _get_base_url(self) -> str:
        return "memory://"

    def _get_endpoint_healthcheck(self) -> str:
        return ""

    ##########################################
    ################ SETTER ##################
    ##########################################

    def add(self, transcript: Transcript) -> None:
        self._transcripts[transcript.id] = transcript

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self) -> None:
        if self._seed_file:
            with open(self._seed_file, encoding="utf-8") as f:
                for item in json.load(f):
                    self.add(Transcript(**item))
            self.logging.info("Seeded %d transcripts from %s.", len(self._transcripts), self._seed_file)

    async def close(self) -> None:
        return None

    async def do_healthcheck(self) -> httpx.Response:
        return httpx.Response(200, json={"status": "ok", "transcripts": len(self._transcripts)})

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_find_by_id(self, transcript_id: str) -> Transcript | None:
        transcript = self._transcripts.get(transcript_id)
        return transcript.model_copy(deep=True) if transcript else None

    async def do_list_eligible(self, transcript_ids: list[str]) -> list[Transcript]:
        return [self._transcripts[i].model_copy(deep=True) for i in transcript_ids if i in self._transcripts]

    async def do_update_embedding_metadata(self, transcript_id: str, metadata: EmbeddingMetadata) -> None:
        transcript = self._transcripts.get(transcript_id)
        if transcript is None:
            self.logging.warning("Cannot store embedding metadata: transcript %s no longer exists.", transcript_id)
            return
        self._transcripts[transcript_id] = transcript.model_copy(update={"embedding_metadata": metadata, "embeddings": None})
