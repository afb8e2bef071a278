"""Ingestion runner entry point.

Ingests the given transcripts once and prints the batch summary as JSON.

Usage:
    python -m services.transcript_ingest.ingest_runner <transcript_id> [<transcript_id> ...] [--concurrent]
"""

import argparse
import asyncio

from shared.clients.ClientManager import ClientManager
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.clients.transcript.TranscriptClientInterface import TranscriptClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from services.transcript_ingest.IngestionService import IngestionService
from services.transcript_ingest.Vectorizer import Vectorizer


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate chunk embeddings for meeting transcripts.")
    parser.add_argument("transcript_ids", nargs="+", help="IDs of the transcripts to ingest")
    parser.add_argument("--concurrent", action="store_true", help="ingest transcripts in parallel (INGEST_CONCURRENCY)")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """Run one ingestion batch. Returns the process exit code."""
    args = _parse_args(argv)
    logger = setup_logging()
    config = HelperConfig(logger=logger)

    embed_client: EmbedClientInterface = ClientManager(config, "embed", "Embed").get_client()
    rag_client: RAGClientInterface = ClientManager(config, "rag", "RAG").get_client()
    transcript_client: TranscriptClientInterface = ClientManager(config, "transcript", "Transcript").get_client()
    clients = [embed_client, rag_client, transcript_client]

    try:
        # every backend is required; abort if any fails to boot
        for client in clients:
            try:
                await client.boot()
                await client.do_healthcheck()
            except Exception as e:
                logger.error(f"Error booting {client.get_client_type().upper()} client {client.get_engine_name()}: {e}. Aborting.")
                return 1

        if not await rag_client.do_existence_check():
            vector_size, distance = await embed_client.do_fetch_embedding_vector_size()
            await rag_client.do_create_collection(vector_size, distance)

        service = IngestionService(
            helper_config=config,
            transcript_client=transcript_client,
            rag_client=rag_client,
            vectorizer=Vectorizer(config, embed_client),
        )
        summary = await service.generate_many(args.transcript_ids, concurrent=args.concurrent)
        print(summary.model_dump_json(indent=2))
        return 0 if summary.summary.errors == 0 else 2
    finally:
        for client in clients:
            await client.close()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
