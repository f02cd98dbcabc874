from __future__ import annotations

from typing import Dict, List, Optional, Union

from .errors import ResolutionError, UnknownBookmarkError
from .logging_utils import setup_logger
from .models import ConfigModel, ResolvedBookmark
from .resolver import TemplateResolver

logger = setup_logger("zbookmarks.cache")

CacheEntry = Union[ResolvedBookmark, ResolutionError]


class ResolutionCache:
    """Resolved bookmarks for one generation of the Config Model.

    Every bookmark is resolved eagerly when the cache is built. A failing
    bookmark records its error and the others are still resolved.
    """

    def __init__(self, entries: Optional[Dict[str, CacheEntry]] = None):
        self._entries: Dict[str, CacheEntry] = dict(entries or {})

    @classmethod
    def build(cls, config: ConfigModel, default_exec: bool = False) -> "ResolutionCache":
        resolver = TemplateResolver(config, default_exec=default_exec)
        entries: Dict[str, CacheEntry] = {}
        for bookmark in config.bookmarks:
            try:
                entries[bookmark.name] = resolver.resolve(bookmark)
            except ResolutionError as e:
                logger.warning(f"⚠️ Failed to resolve bookmark '{bookmark.name}': {e}")
                entries[bookmark.name] = e
        cache = cls(entries)
        logger.info(
            f"📦 Resolution cache built: {len(cache.resolved())} resolved, {len(cache.errors())} failed"
        )
        return cache

    def get(self, name: str) -> ResolvedBookmark:
        """Return the resolved bookmark or raise the error recorded for it."""
        if name not in self._entries:
            raise UnknownBookmarkError(name)
        entry = self._entries[name]
        if isinstance(entry, ResolutionError):
            raise entry
        return entry

    def resolved(self) -> List[ResolvedBookmark]:
        return [e for e in self._entries.values() if isinstance(e, ResolvedBookmark)]

    def errors(self) -> Dict[str, ResolutionError]:
        return {n: e for n, e in self._entries.items() if isinstance(e, ResolutionError)}

    def invalidate_all(self) -> None:
        self._entries.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
