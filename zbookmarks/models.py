from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, field_validator

from .errors import DuplicateBookmarkNameError

COMMAND_PREFIX = "cmd::"
BOOKMARK_PREFIX = "bookmark::"


def _as_text(value: Any) -> str:
    # YAML hands us ints, floats and bools for unquoted scalars
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class LiteralEntry:
    text: str


@dataclass(frozen=True)
class FragmentRef:
    key: str


@dataclass(frozen=True)
class BookmarkRef:
    name: str


RawEntry = Union[LiteralEntry, FragmentRef, BookmarkRef]


def parse_entry(raw: str) -> RawEntry:
    """Classify one entry of a bookmark's ``cmds`` list."""
    if raw.startswith(BOOKMARK_PREFIX):
        return BookmarkRef(raw[len(BOOKMARK_PREFIX):].strip())
    if raw.startswith(COMMAND_PREFIX):
        return FragmentRef(raw[len(COMMAND_PREFIX):].strip())
    return LiteralEntry(raw)


class Bookmark(BaseModel):
    id: int = 0  # 1-based position in the document, assigned on load
    name: str
    desc: str = ""
    cmds: List[str]
    labels: List[str] = []
    vars: Dict[str, str] = {}
    exec: Optional[bool] = None

    @field_validator("name", "desc", mode="before")
    @classmethod
    def _text_fields(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("cmds", mode="before")
    @classmethod
    def _command_list(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_as_text(v) for v in value]
        return value

    @field_validator("labels", mode="before")
    @classmethod
    def _label_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            seen: List[str] = []
            for label in (_as_text(v) for v in value):
                if label not in seen:
                    seen.append(label)
            return seen
        return value

    @field_validator("vars", mode="before")
    @classmethod
    def _var_map(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): _as_text(v) for k, v in value.items()}
        return value

    def entries(self) -> List[RawEntry]:
        return [parse_entry(c) for c in self.cmds]


class ConfigModel(BaseModel):
    """One generation of the bookmarks document."""

    vars: Dict[str, str] = {}
    cmds: Dict[str, str] = {}
    bookmarks: List[Bookmark] = []

    @field_validator("vars", "cmds", mode="before")
    @classmethod
    def _string_map(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): _as_text(v) for k, v in value.items()}
        return value

    @field_validator("bookmarks", mode="before")
    @classmethod
    def _bookmark_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "ConfigModel":
        """Validate a parsed document, number the bookmarks and reject duplicate names.

        Raises pydantic's ``ValidationError`` for shape problems and
        ``DuplicateBookmarkNameError`` when a name is used twice.
        """
        config = cls.model_validate(data)
        counts = Counter(b.name for b in config.bookmarks)
        duplicates = [name for name, n in counts.items() if n > 1]
        if duplicates:
            raise DuplicateBookmarkNameError(duplicates)
        for position, bookmark in enumerate(config.bookmarks, start=1):
            bookmark.id = position
        return config

    def bookmark_map(self) -> Dict[str, Bookmark]:
        return {b.name: b for b in self.bookmarks}


@dataclass(frozen=True)
class ResolvedBookmark:
    id: int
    name: str
    command: str
    exec: bool
    description: str = ""
    labels: Tuple[str, ...] = ()
