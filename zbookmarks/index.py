from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .cache import ResolutionCache
from .models import ConfigModel


@dataclass(frozen=True)
class BookmarkRow:
    id: int
    name: str
    command: str
    exec: bool
    description: str = ""
    labels: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LabelRow:
    id: int
    name: str
    bookmarks: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FailedRow:
    id: int
    name: str
    message: str


@dataclass(frozen=True)
class EntryIndex:
    """Browsable candidate lists for one generation.

    ``bookmarks`` keeps document order and the bookmark's document position
    as its id, so ids do not shift when another bookmark fails to resolve.
    ``labels`` lists each distinct label once, in first-seen order.
    """

    bookmarks: Tuple[BookmarkRow, ...] = ()
    labels: Tuple[LabelRow, ...] = ()
    failures: Tuple[FailedRow, ...] = field(default=())

    @classmethod
    def build(cls, config: ConfigModel, cache: ResolutionCache) -> "EntryIndex":
        bookmark_rows = tuple(
            BookmarkRow(
                id=r.id,
                name=r.name,
                command=r.command,
                exec=r.exec,
                description=r.description,
                labels=r.labels,
            )
            for r in cache.resolved()
        )

        order: List[str] = []
        members = {}
        for row in bookmark_rows:
            for label in row.labels:
                if label not in members:
                    order.append(label)
                    members[label] = []
                members[label].append(row.name)
        label_rows = tuple(
            LabelRow(id=i, name=label, bookmarks=tuple(members[label]))
            for i, label in enumerate(order, start=1)
        )

        errors = cache.errors()
        failures = tuple(
            FailedRow(id=b.id, name=b.name, message=str(errors[b.name]))
            for b in config.bookmarks
            if b.name in errors
        )
        return cls(bookmarks=bookmark_rows, labels=label_rows, failures=failures)
