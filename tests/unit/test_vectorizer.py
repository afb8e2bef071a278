"""
Unit tests for Vectorizer.

Tests cover:
- Order-preserving batch embedding with one call per text
- Rate-limit delay between calls
- Failure reporting with the offending index
- Averaging fallback for oversized texts
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shared.exceptions import DimensionMismatchError, EmbeddingFailureError
from services.transcript_ingest.Vectorizer import Vectorizer

# -------------------------------------------------------------- #
# Fixtures
# -------------------------------------------------------------- #


@pytest.fixture
def mock_embed_client():
    client = MagicMock()
    client.do_embed = AsyncMock()
    client.get_model_name.return_value = "mock-model"
    return client


# -------------------------------------------------------------- #
# Batch
# -------------------------------------------------------------- #


async def test_embed_batch_preserves_order(vectorizer, embed_client):
    texts = ["alpha", "beta", "gamma"]

    vectors = await vectorizer.embed_batch(texts)

    assert embed_client.calls == texts
    assert len(vectors) == 3
    assert all(len(vector) == len(vectors[0]) for vector in vectors)


async def test_embed_batch_sleeps_between_calls(helper_config, mock_embed_client, settings):
    mock_embed_client.do_embed.return_value = [[1.0, 0.0]]
    vectorizer = Vectorizer(helper_config, mock_embed_client, settings.model_copy(update={"embed_batch_delay_ms": 100}))

    with patch("services.transcript_ingest.Vectorizer.asyncio.sleep", new=AsyncMock()) as sleep:
        await vectorizer.embed_batch(["a", "b", "c"])

    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.1)


async def test_embed_batch_failure_reports_index(vectorizer, embed_client):
    embed_client.fail_on = {"broken"}

    with pytest.raises(EmbeddingFailureError) as exc_info:
        await vectorizer.embed_batch(["fine", "broken", "never reached"])

    assert exc_info.value.index == 1
    assert exc_info.value.kind == "embedding-failure"
    assert "never reached" not in embed_client.calls


# -------------------------------------------------------------- #
# Averaging
# -------------------------------------------------------------- #


async def test_embed_averaged_short_text_is_single_call(helper_config, mock_embed_client, settings):
    mock_embed_client.do_embed.return_value = [[0.5, 0.5]]
    vectorizer = Vectorizer(helper_config, mock_embed_client, settings)

    assert await vectorizer.embed_averaged("short") == [0.5, 0.5]
    mock_embed_client.do_embed.assert_awaited_once()


async def test_embed_averaged_long_text_averages_sub_chunks(helper_config, mock_embed_client, settings):
    mock_embed_client.do_embed.side_effect = [[[1, 0, 0, 0]], [[0, 1, 0, 0]], [[0, 0, 1, 0]]]
    vectorizer = Vectorizer(helper_config, mock_embed_client, settings.model_copy(update={"embed_model_max_chars": 10}))

    vector = await vectorizer.embed_averaged("x" * 30)

    assert mock_embed_client.do_embed.await_count == 3
    assert vector == pytest.approx([0.333, 0.333, 0.333, 0.0], abs=1e-3)


async def test_embed_averaged_dimension_mismatch(helper_config, mock_embed_client, settings):
    mock_embed_client.do_embed.side_effect = [[[1, 0, 0, 0]], [[0, 1, 0]]]
    vectorizer = Vectorizer(helper_config, mock_embed_client, settings.model_copy(update={"embed_model_max_chars": 10}))

    with pytest.raises(DimensionMismatchError):
        await vectorizer.embed_averaged("y" * 20)
