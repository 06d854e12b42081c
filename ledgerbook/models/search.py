"""Search result models returned by the ranking engine."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SearchResultType(str, Enum):
    COLLECTION = "collection"
    ITEM = "item"
    ORGANIZATION = "organization"
    LEDGER = "ledger"


class SearchResult(BaseModel):
    """One ranked candidate."""

    item: dict[str, Any] = Field(
        ...,
        description="The matched entity, as a plain dict"
    )
    score: float = Field(..., gt=0, le=100)
    type: SearchResultType


class SearchResults(BaseModel):
    """
    Results of a search across every entity type.

    Each group is ranked independently and shown under its own heading.
    """

    query: str
    collections: list[SearchResult] = Field(default_factory=list)
    items: list[SearchResult] = Field(default_factory=list)
    organizations: list[SearchResult] = Field(default_factory=list)
    ledgers: list[SearchResult] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            len(self.collections)
            + len(self.items)
            + len(self.organizations)
            + len(self.ledgers)
        )

    @property
    def is_empty(self) -> bool:
        return self.total == 0
