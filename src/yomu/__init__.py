"""yomu: acquisition and normalization of Aozora-format Japanese texts."""

from yomu.acquisition import (
    ArchiveEntry,
    ArchiveExtractor,
    ArchiveFetcher,
    ArchiveFormatError,
    ArchiveTooSmall,
    FetchFailed,
    LegacyTextDecoder,
    NoTextEntryFound,
)
from yomu.config import ReaderSettings, load_settings
from yomu.pipeline import ReaderPipeline, TransformResult
from yomu.text import (
    AnnotationTransformer,
    Chapter,
    DocumentStructureParser,
    ParsedDocument,
    SearchMatch,
    TransformMode,
    chapters,
    page_around_line,
    paginate,
    search_text,
)

__all__ = [
    "AnnotationTransformer",
    "ArchiveEntry",
    "ArchiveExtractor",
    "ArchiveFetcher",
    "ArchiveFormatError",
    "ArchiveTooSmall",
    "Chapter",
    "DocumentStructureParser",
    "FetchFailed",
    "LegacyTextDecoder",
    "NoTextEntryFound",
    "ParsedDocument",
    "ReaderPipeline",
    "ReaderSettings",
    "SearchMatch",
    "TransformMode",
    "TransformResult",
    "chapters",
    "load_settings",
    "page_around_line",
    "paginate",
    "search_text",
]
