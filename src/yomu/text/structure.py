"""Header / body / colophon splitting for Aozora-format source texts."""

from __future__ import annotations

import logging
import re

from yomu.text.models import ParsedDocument


logger = logging.getLogger(__name__)

_DIVIDER_RE = re.compile(r"-{20,}")
_COLOPHON_MARKER = "底本："
# Paragraphs that may sit inside a colophon after its opening 底本： paragraph.
_COLOPHON_CONTINUATIONS = ("底本", "入力：", "校正：", "青空文庫作成ファイル：", "このファイルは", "※")
_AUTHOR_LABEL = "【著者名】"
_LABEL_PREFIXES = ("【", "［", "《")


def _is_divider(line: str) -> bool:
    return _DIVIDER_RE.fullmatch(line.strip()) is not None


def _trim_blank_edges(lines: list[str]) -> list[str]:
    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _is_label(line: str) -> bool:
    return line.startswith(_LABEL_PREFIXES)


def _paragraph_starts(lines: list[str]) -> list[int]:
    return [
        index
        for index, line in enumerate(lines)
        if line.strip() and (index == 0 or not lines[index - 1].strip())
    ]


class DocumentStructureParser:
    """Locate the explanatory header and the colophon around the work's body."""

    def parse(self, text: str) -> ParsedDocument:
        lines = text.split("\n")
        divider_indexes = [index for index, line in enumerate(lines) if _is_divider(line)]

        header_lines: list[str] = []
        title: str | None = None
        author: str | None = None
        body_start = 0

        if len(divider_indexes) >= 2 and divider_indexes[1] - divider_indexes[0] > 1:
            first, second = divider_indexes[0], divider_indexes[1]
            preamble = [line.strip() for line in lines[:first] if line.strip()]
            legend = [line.strip() for line in lines[first + 1 : second] if line.strip()]
            header_lines = preamble + legend
            title, author = self._extract_metadata(preamble, legend)
            body_start = second + 1
        else:
            logger.debug("Header dividers not found or degenerate; treating whole text as body")

        body_lines = [line for line in lines[body_start:] if not _is_divider(line)]
        body_lines, footer = self._split_footer(body_lines)
        body = "\n".join(_trim_blank_edges(body_lines))

        return ParsedDocument(
            body=body,
            title=title,
            author=author,
            header_lines=header_lines,
            footer=footer,
        )

    def _extract_metadata(self, preamble: list[str], legend: list[str]) -> tuple[str | None, str | None]:
        title: str | None = None
        author: str | None = None

        for line in preamble + legend:
            if not _is_label(line):
                title = line
                break

        for line in preamble + legend:
            if _AUTHOR_LABEL in line:
                author = line.replace(_AUTHOR_LABEL, "").strip() or None
                break

        if author is None:
            unlabeled = [line for line in preamble if not _is_label(line)]
            if len(unlabeled) >= 2:
                author = unlabeled[1]

        return title, author

    def _split_footer(self, lines: list[str]) -> tuple[list[str], str | None]:
        """Cut the trailing run of colophon paragraphs.

        A colophon opens a paragraph with the marker. Walking paragraphs back
        from the end, the cut moves to each marker paragraph and stops at the
        first prose paragraph, so a marker line inside the narrative is kept.
        """

        footer_start: int | None = None
        for start in reversed(_paragraph_starts(lines)):
            opening = lines[start].lstrip()
            if opening.startswith(_COLOPHON_MARKER):
                footer_start = start
            elif not opening.startswith(_COLOPHON_CONTINUATIONS):
                break

        if footer_start is None:
            return lines, None

        footer = "\n".join(_trim_blank_edges(lines[footer_start:]))
        return lines[:footer_start], footer or None
