"""Parsing of the public book-index CSV into catalog entries.

The index is published as a zipped UTF-8 CSV with one row per (work,
person) pair, so a work appears once per contributor; only the first row
for each work id is kept.
"""

from __future__ import annotations

import csv
import io
import logging

from yomu.catalog.models import CatalogEntry


logger = logging.getLogger(__name__)

BOOK_INDEX_URL = "https://www.aozora.gr.jp/index_pages/list_person_all_extended_utf8.zip"
UNKNOWN_AUTHOR = "不明"

COLUMN_ID = 0
COLUMN_TITLE = 1
COLUMN_TITLE_READING = 2
COLUMN_RELEASE_DATE = 11
COLUMN_CARD_URL = 13
COLUMN_FAMILY_NAME = 15
COLUMN_GIVEN_NAME = 16
COLUMN_FAMILY_NAME_READING = 17
COLUMN_GIVEN_NAME_READING = 18
COLUMN_TEXT_URL = 45


def _field(row: list[str], index: int) -> str:
    if index >= len(row):
        return ""
    return row[index].replace('"', "").strip()


def parse_catalog_row(row: list[str]) -> CatalogEntry | None:
    """Build an entry from one CSV row, or ``None`` when the row is unusable."""

    work_id = _field(row, COLUMN_ID)
    title = _field(row, COLUMN_TITLE)
    archive_url = _field(row, COLUMN_TEXT_URL)
    if not work_id or not title:
        return None
    if not archive_url.startswith("http"):
        return None

    author = (_field(row, COLUMN_FAMILY_NAME) + _field(row, COLUMN_GIVEN_NAME)).strip()
    author_reading = (_field(row, COLUMN_FAMILY_NAME_READING) + _field(row, COLUMN_GIVEN_NAME_READING)).strip()
    return CatalogEntry(
        id=work_id,
        title=title,
        author=author or UNKNOWN_AUTHOR,
        archive_url=archive_url,
        card_url=_field(row, COLUMN_CARD_URL),
        release_date=_field(row, COLUMN_RELEASE_DATE),
        title_reading=_field(row, COLUMN_TITLE_READING),
        author_reading=author_reading,
    )


def parse_catalog_csv(text: str, *, has_header: bool = True) -> list[CatalogEntry]:
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(io.StringIO(text))
    if has_header:
        next(reader, None)

    entries: list[CatalogEntry] = []
    seen: set[str] = set()
    skipped = 0
    for row in reader:
        entry = parse_catalog_row(row)
        if entry is None:
            if any(cell.strip() for cell in row):
                skipped += 1
            continue
        if entry.id in seen:
            continue
        seen.add(entry.id)
        entries.append(entry)

    logger.info("Parsed %d catalog entries (%d rows skipped)", len(entries), skipped)
    return entries
