from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.transcript import EmbeddingMetadata, Transcript


class TranscriptClientInterface(ClientInterface):
    """Document store holding the meeting transcripts.

    find_by_id returns None for an unknown ID; callers decide whether that is
    an error.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "transcript"

    ##########################################
    ############### REQUESTS #################
    ##########################################

    @abstractmethod
    async def do_find_by_id(self, transcript_id: str) -> Transcript | None:
        """Load one transcript, or None if it does not exist."""
        pass

    @abstractmethod
    async def do_list_eligible(self, transcript_ids: list[str]) -> list[Transcript]:
        """Load every existing transcript among transcript_ids, in request order."""
        pass

    @abstractmethod
    async def do_update_embedding_metadata(self, transcript_id: str, metadata: EmbeddingMetadata) -> None:
        """Store ingestion metadata on the transcript and clear its legacy whole-document vector."""
        pass
