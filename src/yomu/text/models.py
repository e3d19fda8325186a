"""Value types shared by the decoding, parsing and reading-view modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DetectedEncoding(str, Enum):
    SHIFT_JIS = "shift_jis"
    UTF8 = "utf-8"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class DecodedDocument:
    """Decoded source text with the encoding that produced it."""

    raw_text: str
    detected_encoding: DetectedEncoding
    encoding_name: str | None = None


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """Source text split into header, body and colophon regions."""

    body: str
    title: str | None = None
    author: str | None = None
    header_lines: list[str] = field(default_factory=list)
    footer: str | None = None

    @property
    def has_header(self) -> bool:
        return bool(self.header_lines)


@dataclass(frozen=True, slots=True)
class Chapter:
    title: str
    start_line: int
    end_line: int


@dataclass(frozen=True, slots=True)
class SearchMatch:
    line_number: int
    column_number: int
    context: str

    def to_dict(self) -> dict[str, str | int]:
        return {
            "line_number": self.line_number,
            "column_number": self.column_number,
            "context": self.context,
        }


@dataclass(frozen=True, slots=True)
class TextStats:
    characters: int
    words: int
    lines: int
    paragraphs: int
    average_line_length: int
