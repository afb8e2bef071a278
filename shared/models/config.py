from typing import Literal

from pydantic import BaseModel, Field


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter required by a backend client.

    Attributes:
        env_key (str): The raw key of the environment variable (without the client prefix).
        val_type (str): The expected type of the value. Supported types are "string", "number", "bool" and "list".
        default (str | int | bool | list | None): Fallback if the variable is not set. None marks the variable as required.
    """

    env_key: str
    val_type: str
    default: str | int | float | bool | list | None = None


class PipelineSettings(BaseModel):
    """
    Tunable knobs of the ingestion and retrieval pipeline.

    Attributes:
        chunk_size:             Maximum characters per chunk.
        chunk_overlap:          Characters shared by consecutive chunks.
        embed_batch_delay_ms:   Pause between successive embedding calls of one batch.
        embed_model_max_chars:  Texts above this length are embedded by averaging sub-chunks.
        ingest_mode:            "chunked" (one vector per chunk) or "averaged" (one vector per transcript).
        ingest_doc_delay_ms:    Pause between transcripts of a sequential batch.
        ingest_concurrency:     Parallel transcripts of a concurrent batch.
        vector_k:               Nearest neighbours for a regular query.
        vector_k_cross:         Nearest neighbours for a cross-meeting query.
        max_results:            Fused result cap for a regular query.
        max_results_cross:      Fused result cap for a cross-meeting query.
        retrieval_timeout:      Seconds before a whole retrieval is abandoned.
        identifier_prefixes:    Two-letter prefixes of task identifiers (e.g. "SP" for SP-123).
    """

    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    embed_batch_delay_ms: int = Field(default=100, ge=0)
    embed_model_max_chars: int = Field(default=16000, gt=0)
    ingest_mode: Literal["chunked", "averaged"] = "chunked"
    ingest_doc_delay_ms: int = Field(default=500, ge=0)
    ingest_concurrency: int = Field(default=5, gt=0)
    vector_k: int = Field(default=8, gt=0)
    vector_k_cross: int = Field(default=20, gt=0)
    max_results: int = Field(default=15, gt=0)
    max_results_cross: int = Field(default=25, gt=0)
    retrieval_timeout: float = Field(default=30.0, gt=0)
    identifier_prefixes: list[str] = ["SP"]
