"""Runtime configuration for text acquisition and reading views."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

from dotenv import load_dotenv


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_FETCH_TIMEOUT_SECONDS = 30.0
DEFAULT_FETCH_MAX_ATTEMPTS = 3
DEFAULT_FETCH_BACKOFF_SECONDS = 1.0
DEFAULT_MIN_ARCHIVE_BYTES = 100
DEFAULT_LINES_PER_PAGE = 30
DEFAULT_SUMMARY_MAX_CHARS = 15000
DEFAULT_CATALOG_TTL_SECONDS = 24 * 60 * 60.0


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.0) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class ReaderSettings:
    """Validated settings shared by the fetcher, pagination and hand-off helpers."""

    user_agent: str = DEFAULT_USER_AGENT
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    fetch_max_attempts: int = DEFAULT_FETCH_MAX_ATTEMPTS
    fetch_backoff_seconds: float = DEFAULT_FETCH_BACKOFF_SECONDS
    min_archive_bytes: int = DEFAULT_MIN_ARCHIVE_BYTES
    lines_per_page: int = DEFAULT_LINES_PER_PAGE
    summary_max_chars: int = DEFAULT_SUMMARY_MAX_CHARS
    catalog_ttl_seconds: float = DEFAULT_CATALOG_TTL_SECONDS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ReaderSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        user_agent = source.get("YOMU_USER_AGENT", DEFAULT_USER_AGENT).strip()
        if not user_agent:
            raise ValueError("YOMU_USER_AGENT cannot be empty")

        raw_values = {
            "YOMU_FETCH_TIMEOUT_SECONDS": source.get(
                "YOMU_FETCH_TIMEOUT_SECONDS", str(DEFAULT_FETCH_TIMEOUT_SECONDS)
            ).strip(),
            "YOMU_FETCH_MAX_ATTEMPTS": source.get("YOMU_FETCH_MAX_ATTEMPTS", str(DEFAULT_FETCH_MAX_ATTEMPTS)).strip(),
            "YOMU_FETCH_BACKOFF_SECONDS": source.get(
                "YOMU_FETCH_BACKOFF_SECONDS", str(DEFAULT_FETCH_BACKOFF_SECONDS)
            ).strip(),
            "YOMU_MIN_ARCHIVE_BYTES": source.get("YOMU_MIN_ARCHIVE_BYTES", str(DEFAULT_MIN_ARCHIVE_BYTES)).strip(),
            "YOMU_LINES_PER_PAGE": source.get("YOMU_LINES_PER_PAGE", str(DEFAULT_LINES_PER_PAGE)).strip(),
            "YOMU_SUMMARY_MAX_CHARS": source.get("YOMU_SUMMARY_MAX_CHARS", str(DEFAULT_SUMMARY_MAX_CHARS)).strip(),
            "YOMU_CATALOG_TTL_SECONDS": source.get(
                "YOMU_CATALOG_TTL_SECONDS", str(DEFAULT_CATALOG_TTL_SECONDS)
            ).strip(),
        }
        for name, raw_value in raw_values.items():
            if not raw_value:
                raise ValueError(f"{name} cannot be empty")

        return cls(
            user_agent=user_agent,
            fetch_timeout_seconds=_parse_positive_float(
                name="YOMU_FETCH_TIMEOUT_SECONDS",
                raw_value=raw_values["YOMU_FETCH_TIMEOUT_SECONDS"],
                minimum=0.1,
            ),
            fetch_max_attempts=_parse_positive_int(
                name="YOMU_FETCH_MAX_ATTEMPTS",
                raw_value=raw_values["YOMU_FETCH_MAX_ATTEMPTS"],
            ),
            fetch_backoff_seconds=_parse_positive_float(
                name="YOMU_FETCH_BACKOFF_SECONDS",
                raw_value=raw_values["YOMU_FETCH_BACKOFF_SECONDS"],
            ),
            min_archive_bytes=_parse_positive_int(
                name="YOMU_MIN_ARCHIVE_BYTES",
                raw_value=raw_values["YOMU_MIN_ARCHIVE_BYTES"],
                minimum=0,
            ),
            lines_per_page=_parse_positive_int(
                name="YOMU_LINES_PER_PAGE",
                raw_value=raw_values["YOMU_LINES_PER_PAGE"],
            ),
            summary_max_chars=_parse_positive_int(
                name="YOMU_SUMMARY_MAX_CHARS",
                raw_value=raw_values["YOMU_SUMMARY_MAX_CHARS"],
                minimum=100,
            ),
            catalog_ttl_seconds=_parse_positive_float(
                name="YOMU_CATALOG_TTL_SECONDS",
                raw_value=raw_values["YOMU_CATALOG_TTL_SECONDS"],
                minimum=1.0,
            ),
        )


def load_settings(dotenv_path: str | None = None) -> ReaderSettings:
    """Load `.env` (if present) into the environment, then build settings."""

    load_dotenv(dotenv_path)
    return ReaderSettings.from_env()
