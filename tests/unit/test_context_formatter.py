from shared.models.search import Provenance, SearchHit
from services.transcript_retrieval.ContextFormatter import GROUP_SEPARATOR, NO_CONTEXT, ContextFormatter


def _hit(transcript_id: str, date: str, text: str, score: float = 0.9) -> SearchHit:
    return SearchHit(
        chunk_id=f"{transcript_id}-{text}",
        transcript_id=transcript_id,
        date=date,
        text=text,
        score=score,
        provenance=Provenance.KEYWORD,
    )


def test_empty_hits_give_sentinel():
    assert ContextFormatter().format([]) == NO_CONTEXT


def test_single_hit_layout():
    assert ContextFormatter().format([_hit("t1", "2025-09-15", "Alice: hi", 0.812)]) == (
        "=== MEETING ON 2025-09-15 ===\n[Source 1] (Similarity: 81.2%)\nAlice: hi"
    )


def test_transcripts_on_same_date_share_one_heading():
    hits = [
        _hit("t1", "2025-09-15", "Alice: first"),
        _hit("t2", "2025-09-15", "Bob: second"),
    ]

    text = ContextFormatter().format(hits)

    assert text.count("=== MEETING ON 2025-09-15 ===") == 1
    assert GROUP_SEPARATOR not in text
    assert "[Source 2] (Similarity: 90.0%)\nBob: second" in text


def test_groups_follow_first_seen_date_order_with_local_numbering():
    hits = [
        _hit("t2", "2025-09-16", "Carol: later meeting"),
        _hit("t1", "2025-09-15", "Alice: earlier meeting"),
        _hit("t2", "2025-09-16", "Dan: later again"),
    ]

    sections = ContextFormatter().format(hits).split(GROUP_SEPARATOR)

    assert len(sections) == 2
    assert sections[0].startswith("=== MEETING ON 2025-09-16 ===")
    assert "[Source 2]" in sections[0] and "Dan: later again" in sections[0]
    assert sections[1] == "=== MEETING ON 2025-09-15 ===\n[Source 1] (Similarity: 90.0%)\nAlice: earlier meeting"
