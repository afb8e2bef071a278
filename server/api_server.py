"""FastAPI application entry point for the transcript chat service."""

import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.exceptions import TranscriptPipelineError
from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.clients.ClientManager import ClientManager
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.clients.transcript.TranscriptClientInterface import TranscriptClientInterface
from services.transcript_ingest.IngestionService import IngestionService
from services.transcript_ingest.Vectorizer import Vectorizer
from services.transcript_retrieval.FusionService import FusionService
from services.transcript_chat.ChatService import ChatService
from server.models.responses import ErrorResponse, HealthResponse
from server.routers.EmbeddingsRouter import router as embeddings_router
from server.routers.ChatRouter import router as chat_router

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")

_STATUS_BY_KIND = {
    "not-found": 404,
    "retrieval-unavailable": 503,
    "retrieval-timeout": 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = HelperConfig(logger=logging)
    settings = app.state.helper_config.get_pipeline_settings()

    embed_client: EmbedClientInterface = ClientManager(app.state.helper_config, "embed", "Embed").get_client()
    rag_client: RAGClientInterface = ClientManager(app.state.helper_config, "rag", "RAG").get_client()
    transcript_client: TranscriptClientInterface = ClientManager(app.state.helper_config, "transcript", "Transcript").get_client()
    llm_client: LLMClientInterface = ClientManager(app.state.helper_config, "llm", "LLM").get_client()
    clients: list[ClientInterface] = [embed_client, rag_client, transcript_client, llm_client]

    logging.info("Booting all clients...")
    for client in clients:
        await client.boot()
    logging.info("All clients booted successfully.")

    await check_connections(clients)

    if not await rag_client.do_existence_check():
        vector_size, distance = await embed_client.do_fetch_embedding_vector_size()
        await rag_client.do_create_collection(vector_size, distance)

    vectorizer = Vectorizer(app.state.helper_config, embed_client, settings)
    app.state.ingestion_service = IngestionService(
        helper_config=app.state.helper_config,
        transcript_client=transcript_client,
        rag_client=rag_client,
        vectorizer=vectorizer,
        settings=settings,
    )
    app.state.chat_service = ChatService(
        helper_config=app.state.helper_config,
        fusion_service=FusionService(app.state.helper_config, rag_client, vectorizer, settings=settings),
        llm_client=llm_client,
        settings=settings,
    )

    # while the app is running...
    yield

    # when the app shuts down, close all client connections
    logging.info("Shutting down — closing all clients...")
    for client in clients:
        await client.close()
    logging.info("All clients closed.")


app = FastAPI(
    title="transcript_chat",
    description=(
        "Question answering over meeting transcripts. Transcripts are split into chunks, "
        "embedded and stored in a vector database (POST /api/embeddings/generate); questions are "
        "answered from vector, keyword and task-identifier search results (POST /api/chat/message)."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(embeddings_router)
app.include_router(chat_router)


@app.exception_handler(TranscriptPipelineError)
async def pipeline_error_handler(request: Request, exc: TranscriptPipelineError) -> JSONResponse:
    status_code = _STATUS_BY_KIND.get(exc.kind, 500)
    logging.error("%s %s failed (%s): %s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(status_code=status_code, content=ErrorResponse(**exc.to_dict()).model_dump())


@app.get("/health", tags=["health"])
async def health() -> HealthResponse:
    return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc).isoformat(), version=app_version)


async def check_connections(clients: list[ClientInterface]) -> None:
    """Check connectivity to all configured backends on startup.

    The language model is non-fatal (answers degrade to an apology); every
    other backend is required.

    Raises:
        Exception: If a required backend is not reachable.
    """
    for client in clients:
        result: httpx.Response = await client.do_healthcheck()
        if result.is_success:
            continue
        if client.get_client_type() == "llm":
            logging.warning(
                "LLM client '%s' is not reachable (status %d). Chat answers will fail.",
                client.get_engine_name(),
                result.status_code,
            )
            continue
        raise Exception(
            f"{client.get_client_type().upper()} client '{client.get_engine_name()}' is not reachable "
            f"(status {result.status_code})."
        )


if __name__ == "__main__":
    import uvicorn

    logging.info(
        "Starting transcript_chat API Server v%s from root dir: %s on port 8000...",
        app_version,
        os.environ.get("ROOT_DIR", "unknown"),
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
