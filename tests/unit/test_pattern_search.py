"""
Unit tests for PatternSearch.

Tests cover:
- Identifier recognition (hyphen, space and no separator; case-insensitive)
- Query classification and term extraction
- Identifier and keyword scanners over stored chunks
"""

import pytest

from shared.models.search import Provenance
from services.transcript_retrieval.PatternSearch import (
    IDENTIFIER_SCORE,
    KEYWORD_SCORE,
    MAX_IDENTIFIER_HITS,
    MAX_KEYWORD_HITS,
    PatternSearch,
)

# -------------------------------------------------------------- #
# Recognition
# -------------------------------------------------------------- #


def test_find_identifiers_variants(pattern_search):
    text = "SP-42, sp 7 and SP100 are open; ASP-12 and 'at 5' are not tasks."

    assert pattern_search.find_identifiers(text) == ["SP-42", "SP-7", "SP-100"]


def test_find_identifiers_reports_every_occurrence(pattern_search):
    assert pattern_search.find_identifiers("SP-1 blocks SP-2, and SP-1 again") == ["SP-1", "SP-2", "SP-1"]


def test_configured_prefixes(helper_config, rag_client, settings):
    search = PatternSearch(helper_config, rag_client, settings.model_copy(update={"identifier_prefixes": ["SP", "QA"]}))

    assert search.find_identifiers("qa-9 depends on SP 3") == ["QA-9", "SP-3"]


@pytest.mark.parametrize(
    "query,identifier,cross",
    [
        ("what tasks were discussed", True, False),
        ("any open tickets?", True, False),
        ("status of SP-12", True, False),
        ("give me a summary of each meeting", False, True),
        ("summarise the meetings separately", False, True),
        ("list the work items per meeting", True, True),
        ("how was the weather", False, False),
    ],
)
def test_classify(pattern_search, query, identifier, cross):
    classification = pattern_search.classify(query)

    assert classification.is_identifier_query is identifier
    assert classification.is_cross_document_query is cross


def test_extract_terms():
    assert PatternSearch.extract_terms("What is the deployment status of the billing-service? Deployment!") == [
        "deployment",
        "status",
        "billing-service",
    ]


# -------------------------------------------------------------- #
# Scanners
# -------------------------------------------------------------- #


async def test_identifier_search_scoped_and_ordered(pattern_search, add_chunk):
    await add_chunk("t1", "Alice: SP-42 is done", chunk_index=0)
    await add_chunk("t1", "Alice: nothing to report", chunk_index=1)
    await add_chunk("t1", "Bob: sp 7 and SP-8 need review", chunk_index=2)
    await add_chunk("t2", "Carol: SP-99 belongs to another team")

    hits = await pattern_search.identifier_search("what tasks were discussed", ["t1"])

    assert [hit.matches for hit in hits] == [["SP-42"], ["SP-7", "SP-8"]]
    assert {hit.provenance for hit in hits} == {Provenance.IDENTIFIER}
    assert {hit.score for hit in hits} == {IDENTIFIER_SCORE}


async def test_identifier_search_restricts_to_named_identifiers(pattern_search, add_chunk):
    await add_chunk("t1", "Alice: SP-42 is done", chunk_index=0)
    await add_chunk("t1", "Bob: SP-7 needs review", chunk_index=1)

    hits = await pattern_search.identifier_search("what happened with sp7?", ["t1"])

    assert [hit.text for hit in hits] == ["Bob: SP-7 needs review"]


async def test_identifier_search_is_capped(pattern_search, add_chunk):
    for i in range(MAX_IDENTIFIER_HITS + 5):
        await add_chunk("t1", f"Dev: SP-{i} is in review", chunk_index=i)

    hits = await pattern_search.identifier_search("list all tasks", ["t1"])

    assert len(hits) == MAX_IDENTIFIER_HITS
    assert hits[0].matches == ["SP-0"]


async def test_keyword_search_matches_terms_case_insensitively(pattern_search, add_chunk):
    await add_chunk("t1", "Alice: The BUDGET review moved to Friday", chunk_index=0)
    await add_chunk("t1", "Bob: lunch plans", chunk_index=1)

    hits = await pattern_search.keyword_search("budget", ["t1"])

    assert [hit.text for hit in hits] == ["Alice: The BUDGET review moved to Friday"]
    assert hits[0].provenance == Provenance.KEYWORD
    assert hits[0].score == KEYWORD_SCORE


async def test_keyword_search_merges_identifier_hits_for_task_queries(pattern_search, add_chunk):
    await add_chunk("t1", "Bob: the release tasks are on track", chunk_index=0)
    await add_chunk("t1", "Alice: SP-42 is done", chunk_index=1)

    hits = await pattern_search.keyword_search("which tasks were discussed", ["t1"])

    assert [hit.provenance for hit in hits] == [Provenance.IDENTIFIER, Provenance.KEYWORD]


async def test_keyword_search_is_capped(pattern_search, add_chunk):
    for i in range(MAX_KEYWORD_HITS + 5):
        await add_chunk("t1", f"Eve: budget line {i}", chunk_index=i)

    assert len(await pattern_search.keyword_search("budget", ["t1"])) == MAX_KEYWORD_HITS


async def test_keyword_search_without_terms_is_empty(pattern_search, add_chunk):
    await add_chunk("t1", "Alice: hi")

    assert await pattern_search.keyword_search("is it?", ["t1"]) == []
