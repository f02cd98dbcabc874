from __future__ import annotations

from enum import Enum
from typing import Iterable, List, TypeVar, Union

from .index import BookmarkRow, LabelRow

Row = TypeVar("Row", BookmarkRow, LabelRow)


class FilterMode(str, Enum):
    """Matching strategy applied to the filter text."""
    NAME = "name"
    ID = "id"
    LABEL = "label"  # Bookmarks mode only

    def __str__(self) -> str:
        return {"name": "Name", "id": "ID", "label": "Label"}[self.value]


def is_number(query: str) -> bool:
    return query.isascii() and query.isdigit()


def _contains(target: str, query: str, ignore_case: bool) -> bool:
    if ignore_case:
        return query.lower() in target.lower()
    return query in target


def keep_row(row: Union[BookmarkRow, LabelRow], mode: FilterMode, query: str, ignore_case: bool) -> bool:
    if not query:
        return True
    if mode == FilterMode.ID:
        # ids are dense small integers, so only an exact match counts
        return is_number(query) and row.id == int(query)
    if mode == FilterMode.LABEL:
        return any(_contains(label, query, ignore_case) for label in row.labels)
    return _contains(row.name, query, ignore_case)


def filter_rows(rows: Iterable[Row], mode: FilterMode, query: str, ignore_case: bool = True) -> List[Row]:
    """Return the rows matching ``query`` in their input order."""
    return [row for row in rows if keep_row(row, mode, query, ignore_case)]


def effective_filter_mode(selected: FilterMode, query: str, autodetect: bool, forced: bool = False) -> FilterMode:
    """Pick the mode actually applied to ``query``.

    An all-digit query switches to ``ID`` when autodetection is on, unless the
    user picked a sub-filter by hand since the last mode reset.
    """
    if autodetect and not forced and is_number(query):
        return FilterMode.ID
    return selected

