from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from server.api_server import app
from shared.models.answer import ChatResult, SourceReference


@pytest.fixture
def chat_service():
    service = MagicMock()
    service.answer = AsyncMock(return_value=ChatResult(
        answer="SP-42 was closed on 2025-09-15.",
        confidence="high",
        follow_up_questions=["Who closed it?"],
        sources=[SourceReference(transcript_id="t1", meeting_id="m1", date="2025-09-15", score=0.95, provenance="identifier", preview="Alice: SP-42 is done")],
        context_used=True,
        chunks_retrieved=1,
        chat_id="c1",
    ))
    return service


@pytest.fixture
def client(chat_service):
    app.state.chat_service = chat_service
    return TestClient(app)


def test_message_returns_answer(client, chat_service):
    response = client.post("/api/chat/message", json={"message": "what tasks?", "transcript_ids": ["t1"], "chat_id": "c1"})

    assert response.status_code == 200
    body = response.json()
    assert body["answer"] == "SP-42 was closed on 2025-09-15."
    assert body["sources"][0]["provenance"] == "identifier"
    assert body["chunks_retrieved"] == 1
    chat_service.answer.assert_awaited_once_with("what tasks?", ["t1"], chat_id="c1")


@pytest.mark.parametrize(
    "body",
    [
        {"message": "", "transcript_ids": ["t1"]},
        {"message": "x" * 4001, "transcript_ids": ["t1"]},
        {"message": "what tasks?", "transcript_ids": []},
        {"message": "what tasks?"},
    ],
)
def test_message_validates_body(client, body):
    assert client.post("/api/chat/message", json=body).status_code == 422
