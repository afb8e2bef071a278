from fastapi import APIRouter, Request

from server.models.requests import ChatMessageRequest
from shared.models.answer import ChatResult

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/message")
async def chat_message(request: Request, body: ChatMessageRequest) -> ChatResult:
    """Answer a question from the selected transcripts.

    Args:
        request (Request): FastAPI request (provides app.state.chat_service).
        body (ChatMessageRequest): The question, the transcript IDs and an optional chat ID.

    Returns:
        ChatResult: Answer, confidence, follow-ups and the retrieved sources.
    """
    chat_service = request.app.state.chat_service
    return await chat_service.answer(body.message, body.transcript_ids, chat_id=body.chat_id)
