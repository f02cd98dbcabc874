from __future__ import annotations

from typing import Iterator, List, Mapping, Tuple

from .errors import (
    CyclicReferenceError,
    UnknownBookmarkError,
    UnknownCommandError,
)
from .logging_utils import setup_logger
from .models import (
    Bookmark,
    BookmarkRef,
    ConfigModel,
    FragmentRef,
    LiteralEntry,
    RawEntry,
    ResolvedBookmark,
)
from .templating import build_scope, render

logger = setup_logger("zbookmarks.resolver")

# shell `&&` with a line continuation so long chains stay readable once pasted
COMMAND_SEPARATOR = " \\\n&& "

_Frame = Tuple[Bookmark, Iterator[RawEntry], Mapping[str, str]]


class TemplateResolver:
    """Expand bookmarks of one Config Model into final command strings.

    Expansion is depth-first over ``bookmark::`` references using an explicit
    frame stack instead of recursion. Each frame carries the variable scope of
    the bookmark it expands, so a referenced bookmark is always rendered with
    its own local vars over the globals, never with the caller's.
    """

    def __init__(self, config: ConfigModel, default_exec: bool = False):
        self.config = config
        self.default_exec = default_exec
        self._arena = config.bookmark_map()

    def _frame(self, bookmark: Bookmark) -> _Frame:
        return bookmark, iter(bookmark.entries()), build_scope(self.config.vars, bookmark.vars)

    def expand(self, bookmark: Bookmark) -> List[str]:
        """Return the ordered list of rendered sub-commands for ``bookmark``."""
        literals: List[str] = []
        in_progress = [bookmark.name]
        active = {bookmark.name}
        frames = [self._frame(bookmark)]

        while frames:
            current, entries, scope = frames[-1]
            entry = next(entries, None)
            if entry is None:
                frames.pop()
                active.discard(in_progress.pop())
                continue

            if isinstance(entry, LiteralEntry):
                literals.append(render(entry.text, scope, current.name))
            elif isinstance(entry, FragmentRef):
                body = self.config.cmds.get(entry.key)
                if body is None:
                    raise UnknownCommandError(entry.key)
                literals.append(render(body, scope, current.name))
            elif isinstance(entry, BookmarkRef):
                target = self._arena.get(entry.name)
                if target is None:
                    raise UnknownBookmarkError(entry.name)
                if entry.name in active:
                    start = in_progress.index(entry.name)
                    raise CyclicReferenceError(in_progress[start:] + [entry.name])
                in_progress.append(entry.name)
                active.add(entry.name)
                frames.append(self._frame(target))

        return literals

    def resolve(self, bookmark: Bookmark) -> ResolvedBookmark:
        literals = self.expand(bookmark)
        command = COMMAND_SEPARATOR.join(literals)
        exec_flag = bookmark.exec if bookmark.exec is not None else self.default_exec
        logger.debug(f"🔧 Resolved '{bookmark.name}' into {len(literals)} command(s)")
        return ResolvedBookmark(
            id=bookmark.id,
            name=bookmark.name,
            command=command,
            exec=exec_flag,
            description=bookmark.desc,
            labels=tuple(bookmark.labels),
        )

    def resolve_name(self, name: str) -> ResolvedBookmark:
        bookmark = self._arena.get(name)
        if bookmark is None:
            raise UnknownBookmarkError(name)
        return self.resolve(bookmark)


def resolve_bookmark(config: ConfigModel, name: str, default_exec: bool = False) -> ResolvedBookmark:
    """Resolve a single bookmark by name without building a cache."""
    return TemplateResolver(config, default_exec=default_exec).resolve_name(name)
