"""Pydantic models for the generation step's answer.

The completion backend sometimes returns a JSON object and sometimes plain
prose; both are modelled as a tagged union discriminated by ``kind``.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class PlainAnswer(BaseModel):
    kind: Literal["plain"] = "plain"
    text: str

    @property
    def confidence(self) -> str:
        return "medium"


class StructuredAnswer(BaseModel):
    kind: Literal["structured"] = "structured"
    answer: str
    confidence: Literal["high", "medium", "low"] = "medium"
    sources_used: list[str] = []
    follow_up_questions: list[str] = []


Answer = Annotated[Union[PlainAnswer, StructuredAnswer], Field(discriminator="kind")]


class SourceReference(BaseModel):
    """A retrieved chunk as shown to the user next to the answer."""

    transcript_id: str
    meeting_id: str | None = None
    date: str
    score: float
    provenance: str
    preview: str


class ChatResult(BaseModel):
    """Everything the chat endpoint returns for one question."""

    answer: str
    confidence: Literal["high", "medium", "low"]
    follow_up_questions: list[str] = []
    sources_used: list[str] = []
    sources: list[SourceReference] = []
    context_used: bool
    chunks_retrieved: int
    chat_id: str | None = None
