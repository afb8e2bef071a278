from pydantic import BaseModel, Field


class GenerateEmbeddingsRequest(BaseModel):
    transcript_ids: list[str] = Field(min_length=1)
    concurrent: bool = False


class ChatMessageRequest(BaseModel):
    message: str = Field(min_length=1, max_length=4000)
    transcript_ids: list[str] = Field(min_length=1)
    chat_id: str | None = None
