"""Domain errors surfaced by archive retrieval and extraction."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class FetchFailed(RuntimeError):
    """The archive could not be retrieved (network, timeout or HTTP status)."""

    url: str
    message: str
    status_code: int | None = None
    attempts: int = 0

    def __str__(self) -> str:
        details = [f"url={self.url}"]
        if self.status_code is not None:
            details.append(f"status={self.status_code}")
        if self.attempts:
            details.append(f"attempts={self.attempts}")
        return f"{self.message} ({', '.join(details)})"


@dataclass(slots=True)
class ArchiveFormatError(Exception):
    """The retrieved payload does not hold the work's text in a usable format."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ArchiveTooSmall(ArchiveFormatError):
    """Payload is below the sanity threshold, usually an error page."""

    message: str = "Downloaded archive is too small"
    size: int = 0
    minimum: int = 0

    def __str__(self) -> str:
        return f"{self.message} (size={self.size}, minimum={self.minimum})"


@dataclass(slots=True)
class NoTextEntryFound(ArchiveFormatError):
    """Archive opened fine but holds no entry with a plain-text suffix."""

    message: str = "No text file found in archive"
    entries: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        listed = ", ".join(self.entries) if self.entries else "<empty>"
        return f"{self.message} (entries={listed})"
