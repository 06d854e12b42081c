"""
Search Engine

Ranks collections, items, organizations and ledger entries against a
free-text query. Each entity type blends several weighted field scores
with max() and is ranked on its own:

    collection    max(name, 0.7 * description)
    item          max(0.5 * collection name, joined field values)
    organization  max(name, 0.5 * phone, 0.5 * email)
    ledger        max(organization name, 0.6 * joined remarks)

Results are sorted by score, highest first, ties keeping input order.
Zero scores are dropped and each list is cut to the result limit.
"""

from typing import Iterable, Optional

from ledgerbook.config import get_settings
from ledgerbook.models.database import DatabaseSnapshot
from ledgerbook.models.inventory import Collection
from ledgerbook.models.ledger import LedgerEntry, Organization
from ledgerbook.models.search import SearchResult, SearchResults, SearchResultType
from ledgerbook.models.values import stringify_value
from ledgerbook.search.scoring import calculate_score

DEFAULT_LIMIT = 10

DESCRIPTION_WEIGHT = 0.7
COLLECTION_NAME_WEIGHT = 0.5
CONTACT_WEIGHT = 0.5
REMARKS_WEIGHT = 0.6


def rank(results: Iterable[SearchResult], limit: int = DEFAULT_LIMIT) -> list[SearchResult]:
    """Highest score first (stable), truncated to `limit`."""
    return sorted(results, key=lambda r: r.score, reverse=True)[:limit]


def search_collections(
    collections: list[Collection],
    query: str,
    limit: int = DEFAULT_LIMIT,
) -> list[SearchResult]:
    if not query.strip():
        return []

    results = []
    for collection in collections:
        name_score = calculate_score(query, collection.name)
        description_score = (
            calculate_score(query, collection.description) * DESCRIPTION_WEIGHT
            if collection.description
            else 0
        )
        score = max(name_score, description_score)
        if score > 0:
            results.append(SearchResult(
                item={
                    "id": collection.id,
                    "name": collection.name,
                    "description": collection.description,
                },
                score=score,
                type=SearchResultType.COLLECTION,
            ))
    return rank(results, limit)


def item_search_text(collection: Collection, values: dict) -> str:
    """Every schema field's value in schema order, joined by spaces."""
    return " ".join(
        stringify_value(values.get(field.key))
        for field in collection.schema_fields
    ).lower()


def search_items(
    collections: list[Collection],
    query: str,
    limit: int = DEFAULT_LIMIT,
) -> list[SearchResult]:
    if not query.strip():
        return []

    results = []
    for collection in collections:
        collection_score = calculate_score(query, collection.name) * COLLECTION_NAME_WEIGHT
        for item in collection.data:
            item_score = calculate_score(query, item_search_text(collection, item.values))
            score = max(collection_score, item_score)
            if score > 0:
                results.append(SearchResult(
                    item={
                        "id": item.id,
                        "collection_id": collection.id,
                        "collection_name": collection.name,
                        "values": dict(item.values),
                    },
                    score=score,
                    type=SearchResultType.ITEM,
                ))
    return rank(results, limit)


def search_organizations(
    organizations: list[Organization],
    query: str,
    limit: int = DEFAULT_LIMIT,
) -> list[SearchResult]:
    if not query.strip():
        return []

    results = []
    for organization in organizations:
        name_score = calculate_score(query, organization.name)
        phone_score = (
            calculate_score(query, organization.phone) * CONTACT_WEIGHT
            if organization.phone
            else 0
        )
        email_score = (
            calculate_score(query, organization.email) * CONTACT_WEIGHT
            if organization.email
            else 0
        )
        score = max(name_score, phone_score, email_score)
        if score > 0:
            results.append(SearchResult(
                item=organization.model_dump(),
                score=score,
                type=SearchResultType.ORGANIZATION,
            ))
    return rank(results, limit)


def search_ledgers(
    entries: list[LedgerEntry],
    query: str,
    limit: int = DEFAULT_LIMIT,
) -> list[SearchResult]:
    if not query.strip():
        return []

    results = []
    for entry in entries:
        organization_score = calculate_score(query, entry.organization.name)
        remarks = " ".join(t.remark or "" for t in entry.transactions)
        remarks_score = calculate_score(query, remarks) * REMARKS_WEIGHT
        score = max(organization_score, remarks_score)
        if score > 0:
            results.append(SearchResult(
                item={
                    "organization_id": entry.organization.id,
                    "organization_name": entry.organization.name,
                },
                score=score,
                type=SearchResultType.LEDGER,
            ))
    return rank(results, limit)


class SearchEngine:
    """
    Runs every entity search over one database snapshot.

    The engine scores any non-blank query; callers decide whether a
    query is long enough to be worth searching.
    """

    def __init__(self, limit: Optional[int] = None):
        self._limit = limit or get_settings().app.search_result_limit

    @property
    def limit(self) -> int:
        return self._limit

    def search(self, snapshot: DatabaseSnapshot, query: str) -> SearchResults:
        return SearchResults(
            query=query,
            collections=search_collections(snapshot.collections, query, self._limit),
            items=search_items(snapshot.collections, query, self._limit),
            organizations=search_organizations(
                [entry.organization for entry in snapshot.ledger],
                query,
                self._limit,
            ),
            ledgers=search_ledgers(snapshot.ledger, query, self._limit),
        )
