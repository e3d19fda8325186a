"""Catalog collaborator contract: book-index parsing and listing cache."""

from .cache import CatalogCache
from .index import BOOK_INDEX_URL, parse_catalog_csv, parse_catalog_row
from .models import CatalogEntry

__all__ = ["BOOK_INDEX_URL", "CatalogCache", "CatalogEntry", "parse_catalog_csv", "parse_catalog_row"]
