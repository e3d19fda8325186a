"""Zip container handling: locate the text payload without decoding it."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
import logging
from zipfile import BadZipFile, ZipFile
import zlib

from yomu.acquisition.errors import ArchiveFormatError, NoTextEntryFound


logger = logging.getLogger(__name__)

DEFAULT_TEXT_SUFFIXES = (".txt",)


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """One named member of the archive with its undecoded bytes."""

    name: str
    raw_bytes: bytes

    def as_tuple(self) -> tuple[bytes, str]:
        return self.raw_bytes, self.name


class ArchiveExtractor:
    """Select the first plain-text member of a zip archive."""

    def __init__(self, text_suffixes: tuple[str, ...] = DEFAULT_TEXT_SUFFIXES) -> None:
        if not text_suffixes:
            raise ValueError("text_suffixes cannot be empty")
        self._text_suffixes = tuple(suffix.lower() for suffix in text_suffixes)

    def list_entries(self, raw: bytes) -> list[str]:
        with self._open(raw) as archive:
            return [name for name in archive.namelist() if not name.endswith("/")]

    def extract(self, raw: bytes) -> ArchiveEntry:
        with self._open(raw) as archive:
            names = [name for name in archive.namelist() if not name.endswith("/")]
            target = next((name for name in names if name.lower().endswith(self._text_suffixes)), None)
            if target is None:
                raise NoTextEntryFound(entries=names)
            try:
                payload = archive.read(target)
            except (BadZipFile, OSError, RuntimeError, EOFError, NotImplementedError, zlib.error) as exc:
                raise ArchiveFormatError(f"Could not read archive entry {target}: {exc}") from exc

        logger.debug("Selected archive entry %s (%d bytes)", target, len(payload))
        return ArchiveEntry(name=target, raw_bytes=payload)

    def _open(self, raw: bytes) -> ZipFile:
        try:
            return ZipFile(BytesIO(raw), "r")
        except BadZipFile as exc:
            raise ArchiveFormatError(f"Payload is not a zip archive: {exc}") from exc
