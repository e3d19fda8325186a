"""Archive download, extraction and legacy-encoding decoding."""

from yomu.acquisition.decoding import LegacyTextDecoder
from yomu.acquisition.errors import ArchiveFormatError, ArchiveTooSmall, FetchFailed, NoTextEntryFound
from yomu.acquisition.extractor import ArchiveEntry, ArchiveExtractor
from yomu.acquisition.fetcher import ArchiveFetcher

__all__ = [
    "ArchiveEntry",
    "ArchiveExtractor",
    "ArchiveFetcher",
    "ArchiveFormatError",
    "ArchiveTooSmall",
    "FetchFailed",
    "LegacyTextDecoder",
    "NoTextEntryFound",
]
