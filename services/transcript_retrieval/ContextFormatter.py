from shared.models.search import SearchHit

NO_CONTEXT = "No relevant transcript content found for this query."
GROUP_SEPARATOR = "\n\n" + "=" * 60 + "\n\n"


class ContextFormatter:
    """Renders fused hits as the context text handed to the language model.

    Hits are grouped by meeting date (transcripts sharing a date are one
    meeting), groups in order of first appearance. Within a group every hit is
    numbered from 1 and shows its score as a percentage. Groups are joined by
    GROUP_SEPARATOR, which differs from the blank line between entries.
    """

    def format(self, hits: list[SearchHit]) -> str:
        if not hits:
            return NO_CONTEXT

        groups: dict[str, list[SearchHit]] = {}
        for hit in hits:
            groups.setdefault(hit.date, []).append(hit)

        sections = []
        for date, group in groups.items():
            entries = "\n\n".join(
                f"[Source {number}] (Similarity: {hit.score * 100:.1f}%)\n{hit.text}"
                for number, hit in enumerate(group, start=1)
            )
            sections.append(f"=== MEETING ON {date} ===\n{entries}")
        return GROUP_SEPARATOR.join(sections)
