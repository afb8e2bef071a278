"""Splits normalized transcript text into overlapping, length-bounded chunks."""

from typing import Iterator

# natural boundaries, strongest first; the separator stays with the left fragment
_BOUNDARIES = ("\n\n", "\n", ". ", "! ", "? ", " ")


class TextChunker:
    """Character-based splitter.

    Every fragment is at most chunk_size characters long. Consecutive
    fragments share chunk_overlap characters, so concatenating the fragments
    with the overlaps removed reproduces the input exactly.
    """

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}.")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError(f"chunk_overlap must be in [0, {chunk_size}), got {chunk_overlap}.")
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def _find_cut(self, text: str, start: int, end: int) -> int:
        """Return the end of the fragment starting at start.

        Boundaries are searched in the back half of the budget first, strongest
        first; failing that, anywhere more than chunk_overlap characters behind
        start. Without any boundary the fragment is cut hard at end.
        """
        for lower in (start + max(self.chunk_overlap, self.chunk_size // 2), start + self.chunk_overlap):
            for separator in _BOUNDARIES:
                position = text.rfind(separator, lower, end)
                if position != -1:
                    return position + len(separator)
        return end

    def chunk(self, text: str) -> Iterator[str]:
        """Yield the fragments of text in order.

        Each call returns a fresh generator, so iteration can be restarted.
        Whitespace-only input yields nothing.
        """
        if not text or not text.strip():
            return
        length = len(text)
        start = 0
        while start < length:
            end = min(start + self.chunk_size, length)
            cut = end if end == length else self._find_cut(text, start, end)
            yield text[start:cut]
            if cut >= length:
                break
            start = cut - self.chunk_overlap
