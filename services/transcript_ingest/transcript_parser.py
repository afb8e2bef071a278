"""Turns raw transcript data into normalized text and fingerprints it."""

import hashlib
import json
from typing import Any

from pydantic import ValidationError

from shared.exceptions import NoContentError
from shared.models.transcript import TranscriptEntry

FINGERPRINT_LENGTH = 16


def normalize_transcript(raw: str | list[dict[str, Any]] | None) -> str:
    """Render speaker turns as one "speaker: text" line each.

    Args:
        raw: JSON string or decoded list of {"speaker", "text"} entries.

    Returns:
        str: The normalized text.

    Raises:
        NoContentError: If the data is missing, malformed or yields only whitespace.
    """
    if raw is None:
        raise NoContentError("Transcript has no transcript data.")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise NoContentError("Transcript data is not valid JSON.", {"error": str(e)})
    if not isinstance(raw, list):
        raise NoContentError("Transcript data must be a list of speaker entries.", {"type": type(raw).__name__})
    try:
        entries = [TranscriptEntry(**item) for item in raw]
    except (TypeError, ValidationError) as e:
        raise NoContentError("Transcript data contains malformed entries.", {"error": str(e)})

    text = "\n".join(f"{entry.speaker}: {entry.text}" for entry in entries)
    if not text.strip():
        raise NoContentError("Transcript contains no text.")
    return text


def fingerprint(text: str) -> str:
    """First 16 hex characters of the SHA-256 of text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]
