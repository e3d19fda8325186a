"""Reading statistics for normalized text."""

from __future__ import annotations

import re

from yomu.text.models import TextStats


_WORD_SPLIT_RE = re.compile(r"\s+")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\n+")


def text_stats(text: str) -> TextStats:
    # Japanese prose has no spaces, so ``words`` counts whitespace-separated runs.
    lines = text.split("\n")
    characters = len(text)
    words = len([word for word in _WORD_SPLIT_RE.split(text) if word])
    paragraphs = len([block for block in _PARAGRAPH_SPLIT_RE.split(text) if block.strip()])
    return TextStats(
        characters=characters,
        words=words,
        lines=len(lines),
        paragraphs=paragraphs,
        average_line_length=round(characters / len(lines)),
    )
