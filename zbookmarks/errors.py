from __future__ import annotations

from typing import Sequence


class BookmarksError(Exception):
    """Base class for every error raised by zbookmarks."""


class DocumentError(BookmarksError):
    """The bookmarks document cannot be turned into a Config Model.

    Raised while (re)loading; the previous generation stays live.
    """


class ConfigParseError(DocumentError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config file '{path}': {reason}")


class DuplicateBookmarkNameError(DocumentError):
    def __init__(self, names: Sequence[str]):
        self.names = list(names)
        super().__init__(f"Duplicate bookmarks names: {', '.join(self.names)}")


class ResolutionError(BookmarksError):
    """A single bookmark could not be expanded into a command."""


class UnknownCommandError(ResolutionError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Command key '{key}' not found in cmds")


class UnknownBookmarkError(ResolutionError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Bookmark '{name}' not found")


class CyclicReferenceError(ResolutionError):
    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.chain)}")


class UndefinedVariableError(ResolutionError):
    def __init__(self, name: str, bookmark: str):
        self.name = name
        self.bookmark = bookmark
        super().__init__(f"Variable '{name}' is not defined for bookmark '{bookmark}'")


class TemplateSyntaxError(ResolutionError):
    def __init__(self, template: str, reason: str):
        self.template = template
        self.reason = reason
        super().__init__(f"Template rendering error: {reason} in '{template}'")


class KeybindingError(BookmarksError):
    """A configured key chord could not be parsed."""


class HostInteractionError(BookmarksError):
    """The host sent something the core cannot interpret."""
