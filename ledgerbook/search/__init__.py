"""Fuzzy search package."""

from ledgerbook.search.engine import (
    SearchEngine,
    rank,
    search_collections,
    search_items,
    search_ledgers,
    search_organizations,
)
from ledgerbook.search.scoring import calculate_score, normalize_text

__all__ = [
    "SearchEngine",
    "calculate_score",
    "normalize_text",
    "rank",
    "search_collections",
    "search_items",
    "search_ledgers",
    "search_organizations",
]
