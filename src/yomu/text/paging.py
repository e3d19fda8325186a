"""Chapter detection and fixed-size line windows over normalized text."""

from __future__ import annotations

import re
from typing import Iterator

from yomu.config import DEFAULT_LINES_PER_PAGE
from yomu.text.models import Chapter


CHAPTER_HEADING_RE = re.compile(r"第[一二三四五六七八九十百千万〇零0-9０-９]+[章節話回部編幕]")


def _validate_lines_per_page(lines_per_page: int) -> None:
    if lines_per_page <= 0:
        raise ValueError("lines_per_page must be positive")


class Pages:
    """Lazy sequence of page strings; every ``iter()`` starts from the first page."""

    def __init__(self, text: str, lines_per_page: int = DEFAULT_LINES_PER_PAGE) -> None:
        _validate_lines_per_page(lines_per_page)
        self._lines = text.split("\n")
        self._lines_per_page = lines_per_page

    @property
    def lines_per_page(self) -> int:
        return self._lines_per_page

    def __len__(self) -> int:
        return -(-len(self._lines) // self._lines_per_page)

    def __iter__(self) -> Iterator[str]:
        for start in range(0, len(self._lines), self._lines_per_page):
            yield "\n".join(self._lines[start : start + self._lines_per_page])

    def __getitem__(self, index: int) -> str:
        count = len(self)
        if index < 0:
            index += count
        if not 0 <= index < count:
            raise IndexError("page index out of range")
        start = index * self._lines_per_page
        return "\n".join(self._lines[start : start + self._lines_per_page])


def paginate(text: str, lines_per_page: int = DEFAULT_LINES_PER_PAGE) -> Pages:
    return Pages(text, lines_per_page)


def page_count(text: str, lines_per_page: int = DEFAULT_LINES_PER_PAGE) -> int:
    return len(Pages(text, lines_per_page))


def page_index_for_line(line_number: int, lines_per_page: int = DEFAULT_LINES_PER_PAGE) -> int:
    _validate_lines_per_page(lines_per_page)
    return max(0, line_number) // lines_per_page


def chapters(text: str) -> list[Chapter]:
    """Record every chapter-number heading in scan order.

    A line holding several headings yields several chapters on the same line.
    Each chapter runs up to the line before the next chapter's first line, the
    last one to the end of the text.
    """

    lines = text.split("\n")
    found: list[tuple[str, int]] = []
    for line_number, line in enumerate(lines):
        for match in CHAPTER_HEADING_RE.finditer(line):
            found.append((line.strip() or match.group(0), line_number))

    result: list[Chapter] = []
    last_line = len(lines) - 1
    for index, (title, start_line) in enumerate(found):
        end_line = last_line
        for _next_title, next_start in found[index + 1 :]:
            if next_start > start_line:
                end_line = next_start - 1
                break
        result.append(Chapter(title=title, start_line=start_line, end_line=end_line))
    return result


def page_around_line(text: str, line_number: int, lines_per_page: int = DEFAULT_LINES_PER_PAGE) -> str:
    """Return a window of ``lines_per_page`` lines centred on ``line_number``.

    The window never indexes past either end of the text. Near the end it is
    shifted back so that it stays full-size when the text is long enough.
    """

    _validate_lines_per_page(lines_per_page)
    lines = text.split("\n")
    start = max(0, line_number - lines_per_page // 2)
    start = min(start, max(0, len(lines) - lines_per_page))
    end = min(len(lines), start + lines_per_page)
    return "\n".join(lines[start:end])
