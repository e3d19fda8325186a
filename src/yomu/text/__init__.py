"""Structure parsing, annotation transforms and reading views."""

from .annotations import AnnotationRule, AnnotationTransformer, TransformMode
from .markup import html_to_text
from .models import Chapter, DecodedDocument, DetectedEncoding, ParsedDocument, SearchMatch, TextStats
from .paging import Pages, chapters, page_around_line, page_count, page_index_for_line, paginate
from .search import search_text
from .stats import text_stats
from .structure import DocumentStructureParser

__all__ = [
    "AnnotationRule",
    "AnnotationTransformer",
    "Chapter",
    "DecodedDocument",
    "DetectedEncoding",
    "DocumentStructureParser",
    "Pages",
    "ParsedDocument",
    "SearchMatch",
    "TextStats",
    "TransformMode",
    "chapters",
    "html_to_text",
    "page_around_line",
    "page_count",
    "page_index_for_line",
    "paginate",
    "search_text",
    "text_stats",
]
