"""End-to-end reading pipeline: archive URL to normalized text and views."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from yomu.acquisition.decoding import LegacyTextDecoder
from yomu.acquisition.extractor import ArchiveExtractor
from yomu.acquisition.fetcher import ArchiveFetcher
from yomu.config import ReaderSettings
from yomu.summary import SummaryRequest
from yomu.text.annotations import AnnotationTransformer, TransformMode
from yomu.text.markup import html_to_text
from yomu.text.models import Chapter, ParsedDocument, SearchMatch
from yomu.text.paging import Pages, chapters, page_around_line, paginate
from yomu.text.search import search_text
from yomu.text.structure import DocumentStructureParser


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransformResult:
    """Normalized text in one fidelity mode plus the metadata the reader needs."""

    normalized_text: str
    mode: TransformMode
    title: str | None = None
    author: str | None = None
    chapters: list[Chapter] = field(default_factory=list)
    searchable_text: str | None = None


class ReaderPipeline:
    """Wire fetcher, extractor, decoder, parser and transformer together.

    Every stage is injectable. Instances hold no per-document state, so one
    pipeline can serve concurrent requests for different archives as long as
    the injected fetcher's HTTP session allows it.
    """

    def __init__(
        self,
        settings: ReaderSettings | None = None,
        *,
        fetcher: ArchiveFetcher | None = None,
        extractor: ArchiveExtractor | None = None,
        decoder: LegacyTextDecoder | None = None,
        structure_parser: DocumentStructureParser | None = None,
        transformer: AnnotationTransformer | None = None,
    ) -> None:
        self._settings = settings or ReaderSettings()
        self._fetcher = fetcher or ArchiveFetcher(self._settings)
        self._extractor = extractor or ArchiveExtractor()
        self._decoder = decoder or LegacyTextDecoder()
        self._structure_parser = structure_parser or DocumentStructureParser()
        self._transformer = transformer or AnnotationTransformer()

    @property
    def settings(self) -> ReaderSettings:
        return self._settings

    def load(self, url: str) -> ParsedDocument:
        """Fetch, extract, decode and split the work at *url*."""

        raw = self._fetcher.fetch(url)
        return self._parse_archive(raw)

    def read(self, url: str, mode: TransformMode | str = TransformMode.RENDER) -> TransformResult:
        return self._build_result(self.load(url), TransformMode(mode))

    def from_bytes(self, raw: bytes, mode: TransformMode | str = TransformMode.RENDER) -> TransformResult:
        """Run the pipeline on an already downloaded archive payload."""

        return self._build_result(self._parse_archive(raw), TransformMode(mode))

    def transform_text(self, text: str, mode: TransformMode | str = TransformMode.RENDER) -> TransformResult:
        """Run structure parsing and annotation transforms on decoded text."""

        return self._build_result(self._structure_parser.parse(text), TransformMode(mode))

    def plain_text(self, result: TransformResult) -> str:
        """Plain searchable text for *result*, whatever its mode."""

        if result.searchable_text is not None:
            return result.searchable_text
        if result.mode is TransformMode.RENDER:
            return html_to_text(result.normalized_text)
        return result.normalized_text

    def search(self, result: TransformResult, keyword: str) -> list[SearchMatch]:
        return search_text(self.plain_text(result), keyword)

    def pages(self, result: TransformResult, lines_per_page: int | None = None) -> Pages:
        return paginate(self.plain_text(result), lines_per_page or self._settings.lines_per_page)

    def page_around_match(self, result: TransformResult, match: SearchMatch, lines_per_page: int | None = None) -> str:
        return page_around_line(
            self.plain_text(result),
            match.line_number,
            lines_per_page or self._settings.lines_per_page,
        )

    def summary_request(self, result: TransformResult) -> SummaryRequest:
        """Bounded plain-text excerpt for an external summarizer."""

        return SummaryRequest.from_plain_text(
            self.plain_text(result),
            title=result.title,
            author=result.author,
            max_chars=self._settings.summary_max_chars,
        )

    def _parse_archive(self, raw: bytes) -> ParsedDocument:
        entry = self._extractor.extract(raw)
        decoded = self._decoder.decode_document(entry.raw_bytes)
        logger.info(
            "Decoded %s as %s (%d characters)",
            entry.name,
            decoded.encoding_name or decoded.detected_encoding.value,
            len(decoded.raw_text),
        )
        return self._structure_parser.parse(decoded.raw_text)

    def _build_result(self, document: ParsedDocument, mode: TransformMode) -> TransformResult:
        nodes = self._transformer.parse(document.body)
        plain = self._transformer.render(nodes, TransformMode.PLAIN_STRIP)
        normalized = plain if mode is TransformMode.PLAIN_STRIP else self._transformer.render(nodes, mode)
        return TransformResult(
            normalized_text=normalized,
            mode=mode,
            title=document.title,
            author=document.author,
            chapters=chapters(plain),
            searchable_text=plain,
        )
