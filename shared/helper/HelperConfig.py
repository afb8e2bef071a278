"""Central configuration helper for the transcript chat bridge."""

import logging
import os

from shared.models.config import PipelineSettings


class HelperConfig:
    """Central configuration helper. Reads all settings from environment variables."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """Read a string environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (str | None): Fallback value if the variable is not set.

        Returns:
            str: The resolved value.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        key = key.upper()
        val = os.getenv(key) or None  # empty string → None
        if val is None and default is None:
            raise ValueError(f"Environment variable '{key}' is not set.")
        return val.strip() if val is not None else default

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read a numeric environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (float | int | None): Fallback value if the variable is not set.

        Returns:
            float | int: The resolved numeric value.

        Raises:
            ValueError: If the variable is not set and no default is provided.
            ValueError: If the value cannot be parsed as a number.
        """
        key = key.upper()
        raw = os.getenv(key) or None
        if raw is None:
            if default is None:
                raise ValueError(f"Environment variable '{key}' is not set.")
            return default
        try:
            return int(raw) if "." not in raw else float(raw)
        except ValueError:
            raise ValueError(f"Environment variable '{key}' is not a valid number: '{raw}'.")

    def get_bool_val(self, key: str, default: bool | None = None) -> bool:
        """Read a boolean environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (bool | None): Fallback value if the variable is not set.

        Returns:
            bool: The resolved boolean value.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        key = key.upper()
        raw = os.getenv(key) or None
        if raw is None:
            if default is None:
                raise ValueError(f"Environment variable '{key}' is not set.")
            return default
        return raw.lower() in ("true", "1", "yes")

    def get_list_val(self, key: str, default: list[str] | None = None, separator: str = ",", element_type: type = str) -> list:
        """Read a list environment variable in the form "[elem1,elem2,...]".

        Args:
            key (str): Environment variable name (case-insensitive).
            default (list[str] | None): Fallback value if the variable is not set.
            separator (str): The delimiter between elements.
            element_type (type): The type to which each element should be cast.

        Returns:
            list: The resolved list of elements.

        Raises:
            ValueError: If the variable is not set and no default is provided,
                        if the brackets are missing or an element cannot be cast.
        """
        key = key.upper()
        raw_val = os.getenv(key) or None
        if raw_val is None:
            if default is None:
                raise ValueError(f"Environment variable '{key}' is not set.")
            return default
        raw_val = raw_val.strip()
        if not raw_val.startswith("[") or not raw_val.endswith("]"):
            raise ValueError(f"Environment variable '{key}' must be in the format '[elem1{separator}elem2{separator}...]'. Got: '{raw_val}'")
        elements = [v.strip() for v in raw_val[1:-1].split(separator) if v.strip()]
        try:
            return [element_type(elem) for elem in elements]
        except ValueError as e:
            raise ValueError(f"Environment variable '{key}' contains invalid elements: {e}. Type set to {element_type.__name__}. Got: '{raw_val}'")

    def get_pipeline_settings(self) -> PipelineSettings:
        """Collect all ingestion and retrieval knobs into one settings object.

        Returns:
            PipelineSettings: Settings with environment overrides applied.
        """
        defaults = PipelineSettings()
        return PipelineSettings(
            chunk_size=int(self.get_number_val("CHUNK_SIZE", default=defaults.chunk_size)),
            chunk_overlap=int(self.get_number_val("CHUNK_OVERLAP", default=defaults.chunk_overlap)),
            embed_batch_delay_ms=int(self.get_number_val("EMBED_BATCH_DELAY_MS", default=defaults.embed_batch_delay_ms)),
            embed_model_max_chars=int(self.get_number_val("EMBED_MODEL_MAX_CHARS", default=defaults.embed_model_max_chars)),
            ingest_mode=self.get_string_val("INGEST_MODE", default=defaults.ingest_mode).lower(),
            ingest_doc_delay_ms=int(self.get_number_val("INGEST_DOC_DELAY_MS", default=defaults.ingest_doc_delay_ms)),
            ingest_concurrency=int(self.get_number_val("INGEST_CONCURRENCY", default=defaults.ingest_concurrency)),
            vector_k=int(self.get_number_val("RETRIEVAL_VECTOR_K", default=defaults.vector_k)),
            vector_k_cross=int(self.get_number_val("RETRIEVAL_VECTOR_K_CROSS", default=defaults.vector_k_cross)),
            max_results=int(self.get_number_val("RETRIEVAL_MAX_RESULTS", default=defaults.max_results)),
            max_results_cross=int(self.get_number_val("RETRIEVAL_MAX_RESULTS_CROSS", default=defaults.max_results_cross)),
            retrieval_timeout=float(self.get_number_val("RETRIEVAL_TIMEOUT", default=defaults.retrieval_timeout)),
            identifier_prefixes=self.get_list_val("IDENTIFIER_PREFIXES", default=defaults.identifier_prefixes),
        )

    def get_logger(self) -> logging.Logger:
        """Return the application logger.

        Returns:
            logging.Logger: The configured logger instance.
        """
        return self._logger
