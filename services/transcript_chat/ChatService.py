"""Question answering over meeting transcripts.

retrieve -> format context -> chat completion -> parse answer. Retrieval
errors degrade to an empty context; a failing completion degrades to a
low-confidence apology. Neither is surfaced to the caller as an error.
"""

import json

from pydantic import ValidationError

from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.exceptions import RetrievalTimeoutError, RetrievalUnavailableError
from shared.helper.HelperConfig import HelperConfig
from shared.models.answer import ChatResult, PlainAnswer, SourceReference, StructuredAnswer
from shared.models.config import PipelineSettings
from shared.models.search import SearchHit
from services.transcript_chat.prompts import build_system_prompt
from services.transcript_retrieval.ContextFormatter import ContextFormatter
from services.transcript_retrieval.FusionService import FusionService

PREVIEW_LENGTH = 500
ERROR_ANSWER = "I encountered an error while processing your request. Please try again or rephrase your question."


def parse_answer(raw: str) -> PlainAnswer | StructuredAnswer:
    """Structured parse first, plain text otherwise.

    A JSON object with a non-empty "answer" field becomes a StructuredAnswer;
    anything else (prose, invalid JSON, wrong field types) is a PlainAnswer.
    """
    stripped = raw.strip()
    if stripped.startswith("{"):
        try:
            data = json.loads(stripped)
            if isinstance(data, dict) and data.get("answer"):
                return StructuredAnswer(**{k: v for k, v in data.items() if k != "kind"})
        except (json.JSONDecodeError, ValidationError, TypeError):
            pass
    return PlainAnswer(text=raw)


class ChatService:
    def __init__(
        self,
        helper_config: HelperConfig,
        fusion_service: FusionService,
        llm_client: LLMClientInterface,
        formatter: ContextFormatter | None = None,
        settings: PipelineSettings | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._fusion_service = fusion_service
        self._llm_client = llm_client
        self._formatter = formatter or ContextFormatter()
        self._settings = settings or helper_config.get_pipeline_settings()

    async def answer(self, question: str, transcript_ids: list[str], chat_id: str | None = None) -> ChatResult:
        try:
            hits = await self._fusion_service.retrieve(question, transcript_ids)
        except (RetrievalUnavailableError, RetrievalTimeoutError) as e:
            self.logging.error("Retrieval failed (%s), answering without context: %s", e.kind, e.message)
            hits = []

        context = self._formatter.format(hits)
        messages = [
            {"role": "system", "content": build_system_prompt(context, self._settings.identifier_prefixes)},
            {"role": "user", "content": question},
        ]
        try:
            reply = parse_answer(await self._llm_client.do_chat(messages))
        except Exception as e:
            self.logging.error("Chat completion failed: %s", e)
            reply = StructuredAnswer(answer=ERROR_ANSWER, confidence="low")

        if isinstance(reply, StructuredAnswer):
            text, follow_ups, sources_used = reply.answer, reply.follow_up_questions, reply.sources_used
        else:
            text, follow_ups, sources_used = reply.text, [], []

        return ChatResult(
            answer=text,
            confidence=reply.confidence,
            follow_up_questions=follow_ups,
            sources_used=sources_used,
            sources=[self._to_source(hit) for hit in hits],
            context_used=bool(hits),
            chunks_retrieved=len(hits),
            chat_id=chat_id,
        )

    @staticmethod
    def _to_source(hit: SearchHit) -> SourceReference:
        preview = hit.text[:PREVIEW_LENGTH] + ("..." if len(hit.text) > PREVIEW_LENGTH else "")
        return SourceReference(
            transcript_id=hit.transcript_id,
            meeting_id=hit.meeting_id,
            date=hit.date,
            score=hit.score,
            provenance=hit.provenance.value,
            preview=preview,
        )
