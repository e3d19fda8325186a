"""Catalog records consumed by the catalog-search collaborator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    id: str
    title: str
    author: str
    archive_url: str
    card_url: str = ""
    release_date: str = ""
    title_reading: str = ""
    author_reading: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "archive_url": self.archive_url,
            "card_url": self.card_url,
            "release_date": self.release_date,
        }
