"""Exact substring search over normalized text."""

from __future__ import annotations

from yomu.text.models import SearchMatch


DEFAULT_CONTEXT_RADIUS = 20


def search_text(text: str, keyword: str, context_radius: int = DEFAULT_CONTEXT_RADIUS) -> list[SearchMatch]:
    """Find every non-overlapping occurrence of ``keyword``, line by line.

    Matching is case-sensitive with no width or kana folding. After a hit the
    scan resumes past the whole match, so ``"aa"`` occurs twice in ``"aaaa"``.
    ``context`` is the match plus ``context_radius`` characters on each side,
    clamped to the line.
    """

    if context_radius < 0:
        raise ValueError("context_radius must be non-negative")
    if not keyword:
        return []

    matches: list[SearchMatch] = []
    for line_number, line in enumerate(text.split("\n")):
        column = line.find(keyword)
        while column != -1:
            start = max(0, column - context_radius)
            end = min(len(line), column + len(keyword) + context_radius)
            matches.append(SearchMatch(line_number=line_number, column_number=column, context=line[start:end]))
            column = line.find(keyword, column + len(keyword))
    return matches
