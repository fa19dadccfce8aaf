"""
CardBox – Collection list ordering
===================================
Display orderings for the collection list.  Sorting never touches the
store's own order.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List

from core.models import Collection


class SortChoice(Enum):
    NEWEST_FIRST = "Newest first"
    OLDEST_FIRST = "Oldest first"
    TITLE_ASC = "Title A–Z"
    TITLE_DESC = "Title Z–A"


def sort_collections(collections: Iterable[Collection], choice: SortChoice) -> List[Collection]:
    """Return a new list of *collections* ordered by *choice*."""
    items = list(collections)
    if choice is SortChoice.NEWEST_FIRST:
        return sorted(items, key=lambda c: c.created_at, reverse=True)
    if choice is SortChoice.OLDEST_FIRST:
        return sorted(items, key=lambda c: c.created_at)
    if choice is SortChoice.TITLE_ASC:
        return sorted(items, key=lambda c: c.title.lower())
    if choice is SortChoice.TITLE_DESC:
        return sorted(items, key=lambda c: c.title.lower(), reverse=True)
    raise ValueError(f"Unknown sort choice: {choice!r}")
