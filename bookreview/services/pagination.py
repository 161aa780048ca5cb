"""
Pagination Service

Sorting and page slicing over a collection already loaded into memory.

Sorting Rules:
==============
- sort_by is checked against a per-entity allow-list. Unknown values fall
  back to the entity's default field; they are never an error.
- sort_order is descending only for the string "desc" (any case).
  Anything else is ascending. When no order is given at all, the entity's
  default order is used (books ascending, reviews newest first).
- Sorting is stable and works on a copy; the input list is never reordered.
- Text fields compare case-insensitively with Unicode collation (pyuca), numeric
  fields numerically, timestamps chronologically.

Pagination Rules:
=================
- page is 1-based; items [(page - 1) * limit, page * limit) are returned
- a page past the end yields an empty list, not an error
- total_pages = ceil(total / limit), and 0 for an empty collection

page and limit are not validated here; routers coerce them first (see
dependencies.PaginationParams).
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any

from pyuca import Collator

from bookreview.database import Record

ASC = "asc"
DESC = "desc"


@lru_cache
def get_collator() -> Collator:
    """Unicode Collation Algorithm collator; loading its table is slow."""
    return Collator()


def _text_key(value: Any) -> tuple[int, ...]:
    if value is None:
        return ()
    return get_collator().sort_key(str(value).casefold())


def _number_key(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def _timestamp_key(value: Any) -> float:
    if not isinstance(value, str):
        return 0.0
    try:
        return datetime.fromisoformat(value).timestamp()
    except ValueError:
        return 0.0


@dataclass(frozen=True)
class Sorting:
    """Allow-listed sort fields of one entity type, with their defaults."""

    fields: dict[str, Callable[[Any], Any]]
    default_field: str
    default_order: str = ASC

    def resolve(self, sort_by: str | None, sort_order: str | None) -> tuple[str, str]:
        """Map raw query values to a valid (field, order) pair."""
        field = sort_by if sort_by in self.fields else self.default_field
        if sort_order is None:
            order = self.default_order
        else:
            order = DESC if str(sort_order).lower() == DESC else ASC
        return field, order


BOOK_SORTING = Sorting(
    fields={
        "title": _text_key,
        "author": _text_key,
        "publishedYear": _number_key,
        "averageRating": _number_key,
        "reviewCount": _number_key,
    },
    default_field="title",
)

REVIEW_SORTING = Sorting(
    fields={
        "timestamp": _timestamp_key,
        "rating": _number_key,
    },
    default_field="timestamp",
    default_order=DESC,
)


@dataclass
class Page:
    """One page of a sorted collection plus its metadata."""

    items: list[Record]
    total_items: int
    page: int
    limit: int
    total_pages: int
    sort_by: str
    sort_order: str


def sort_records(
    items: Sequence[Record],
    sort_by: str | None,
    sort_order: str | None,
    sorting: Sorting = BOOK_SORTING,
) -> list[Record]:
    """Return a new, stably sorted list. Invalid sort values fall back to defaults."""
    field, order = sorting.resolve(sort_by, sort_order)
    key = sorting.fields[field]
    # sorted(reverse=True) keeps equal elements in their original order
    return sorted(items, key=lambda item: key(item.get(field)), reverse=order == DESC)


def total_pages_for(total_items: int, limit: int) -> int:
    if total_items == 0:
        return 0
    return math.ceil(total_items / limit)


def paginate(
    items: Sequence[Record],
    page: int,
    limit: int,
    sort_by: str | None = None,
    sort_order: str | None = None,
    sorting: Sorting = BOOK_SORTING,
) -> Page:
    """
    Sort a collection and return one page of it.

    Args:
        items: Full collection (not modified)
        page: 1-based page number, may exceed the number of pages
        limit: Page size, already validated as a positive integer
        sort_by: Requested sort field; unknown fields use the default
        sort_order: "desc" for descending, anything else ascending
        sorting: Allow-list and defaults for the entity type

    Returns:
        Page echoing the resolved sort field and order
    """
    field, order = sorting.resolve(sort_by, sort_order)
    sorted_items = sort_records(items, field, order, sorting)

    start_index = (page - 1) * limit
    end_index = page * limit

    return Page(
        items=sorted_items[start_index:end_index],
        total_items=len(sorted_items),
        page=page,
        limit=limit,
        total_pages=total_pages_for(len(sorted_items), limit),
        sort_by=field,
        sort_order=order,
    )
