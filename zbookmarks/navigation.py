from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Type, Union

from .filters import FilterMode, effective_filter_mode, filter_rows
from .index import BookmarkRow, EntryIndex, LabelRow


class Mode(int, Enum):
    """Top level view. Values double as the Ctrl+<digit> shortcut."""
    BOOKMARKS = 1
    LABELS = 2
    USAGE = 3

    def next(self) -> "Mode":
        return Mode(self.value % len(Mode) + 1)

    def prev(self) -> "Mode":
        return Mode((self.value - 2) % len(Mode) + 1)

    def __str__(self) -> str:
        return self.name.title()


# --- events -----------------------------------------------------------------

@dataclass(frozen=True)
class CharInput:
    char: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class MoveUp:
    pass


@dataclass(frozen=True)
class MoveDown:
    pass


@dataclass(frozen=True)
class SwitchMode:
    mode: Mode


@dataclass(frozen=True)
class NextMode:
    pass


@dataclass(frozen=True)
class PrevMode:
    pass


@dataclass(frozen=True)
class ToggleFilter:
    filter_mode: FilterMode


@dataclass(frozen=True)
class Enter:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class EditRequested:
    pass


@dataclass(frozen=True)
class ReloadRequested:
    pass


@dataclass(frozen=True)
class DescribeRequested:
    pass


Event = Union[
    CharInput, Backspace, MoveUp, MoveDown, SwitchMode, NextMode, PrevMode,
    ToggleFilter, Enter, Quit, EditRequested, ReloadRequested, DescribeRequested,
]


# --- effects for the host -----------------------------------------------------

class _Effect:
    def to_dict(self) -> dict:
        return {"type": type(self).__name__, **asdict(self)}


@dataclass(frozen=True)
class DeliverCommand(_Effect):
    text: str
    exec: bool

    @property
    def payload(self) -> str:
        """Text to paste; a trailing newline makes the terminal run it."""
        return self.text + "\n" if self.exec else self.text


@dataclass(frozen=True)
class OpenEditor(_Effect):
    path: str


@dataclass(frozen=True)
class Reload(_Effect):
    # filled in by the session once it has performed the reload
    ok: bool = True
    error: Optional[str] = None


@dataclass(frozen=True)
class Describe(_Effect):
    text: str


@dataclass(frozen=True)
class Exit(_Effect):
    pass


Effect = Union[DeliverCommand, OpenEditor, Reload, Describe, Exit]


# --- state ----------------------------------------------------------------------

@dataclass(frozen=True)
class NavigationState:
    mode: Mode = Mode.BOOKMARKS
    filter_mode: FilterMode = FilterMode.NAME
    filter_text: str = ""
    selection: int = 0
    # set when the user picked a sub-filter by hand since the last mode reset
    filter_forced: bool = False

    @classmethod
    def initial(cls, mode: Mode = Mode.BOOKMARKS) -> "NavigationState":
        return cls(mode=mode)


@dataclass(frozen=True)
class NavigationContext:
    """Read-only inputs of a transition: the current generation plus knobs."""
    index: EntryIndex
    ignore_case: bool = True
    autodetect: bool = True
    path: str = ""


Transition = Tuple[NavigationState, Tuple[Effect, ...]]


def active_filter_mode(state: NavigationState, ctx: NavigationContext) -> FilterMode:
    return effective_filter_mode(state.filter_mode, state.filter_text, ctx.autodetect, state.filter_forced)


def visible_rows(state: NavigationState, ctx: NavigationContext) -> List[Union[BookmarkRow, LabelRow]]:
    mode = active_filter_mode(state, ctx)
    if state.mode == Mode.BOOKMARKS:
        return filter_rows(ctx.index.bookmarks, mode, state.filter_text, ctx.ignore_case)
    if state.mode == Mode.LABELS:
        return filter_rows(ctx.index.labels, mode, state.filter_text, ctx.ignore_case)
    return []


def selected_row(state: NavigationState, ctx: NavigationContext):
    rows = visible_rows(state, ctx)
    if not rows:
        return None
    return rows[min(state.selection, len(rows) - 1)]


def _filterable(state: NavigationState) -> bool:
    return state.mode in (Mode.BOOKMARKS, Mode.LABELS)


def _on_char(state: NavigationState, event: CharInput, ctx: NavigationContext) -> Transition:
    if not _filterable(state):
        return state, ()
    return replace(state, filter_text=state.filter_text + event.char, selection=0), ()


def _on_backspace(state: NavigationState, event: Backspace, ctx: NavigationContext) -> Transition:
    if not _filterable(state) or not state.filter_text:
        return state, ()
    return replace(state, filter_text=state.filter_text[:-1], selection=0), ()


def _move(state: NavigationState, ctx: NavigationContext, step: int) -> Transition:
    count = len(visible_rows(state, ctx))
    if count == 0:
        return replace(state, selection=0), ()
    selection = max(0, min(state.selection + step, count - 1))
    return replace(state, selection=selection), ()


def _on_up(state: NavigationState, event: MoveUp, ctx: NavigationContext) -> Transition:
    return _move(state, ctx, -1)


def _on_down(state: NavigationState, event: MoveDown, ctx: NavigationContext) -> Transition:
    return _move(state, ctx, 1)


def _on_switch_mode(state: NavigationState, event: SwitchMode, ctx: NavigationContext) -> Transition:
    if event.mode == state.mode:
        return state, ()
    return NavigationState.initial(event.mode), ()


def _on_next_mode(state: NavigationState, event: NextMode, ctx: NavigationContext) -> Transition:
    return NavigationState.initial(state.mode.next()), ()


def _on_prev_mode(state: NavigationState, event: PrevMode, ctx: NavigationContext) -> Transition:
    return NavigationState.initial(state.mode.prev()), ()


def _on_toggle_filter(state: NavigationState, event: ToggleFilter, ctx: NavigationContext) -> Transition:
    if not _filterable(state):
        return state, ()
    if event.filter_mode == FilterMode.LABEL and state.mode != Mode.BOOKMARKS:
        return state, ()
    target = FilterMode.NAME if state.filter_mode == event.filter_mode else event.filter_mode
    return replace(state, filter_mode=target, filter_forced=True, selection=0), ()


def _on_enter(state: NavigationState, event: Enter, ctx: NavigationContext) -> Transition:
    row = selected_row(state, ctx)
    if row is None:
        return state, ()
    if state.mode == Mode.BOOKMARKS:
        return state, (DeliverCommand(text=row.command, exec=row.exec), Exit())
    if state.mode == Mode.LABELS:
        # drill down into the bookmarks carrying the selected label
        return NavigationState(
            mode=Mode.BOOKMARKS,
            filter_mode=FilterMode.LABEL,
            filter_text=row.name,
            selection=0,
            filter_forced=True,
        ), ()
    return state, ()


def _on_quit(state: NavigationState, event: Quit, ctx: NavigationContext) -> Transition:
    return state, (Exit(),)


def _on_edit(state: NavigationState, event: EditRequested, ctx: NavigationContext) -> Transition:
    return state, (OpenEditor(path=ctx.path),)


def _on_reload(state: NavigationState, event: ReloadRequested, ctx: NavigationContext) -> Transition:
    return state, (Reload(),)


def _on_describe(state: NavigationState, event: DescribeRequested, ctx: NavigationContext) -> Transition:
    if state.mode != Mode.BOOKMARKS:
        return state, ()
    row = selected_row(state, ctx)
    if row is None:
        return state, ()
    return state, (Describe(text=row.description),)


_HANDLERS: Dict[Type, Callable[..., Transition]] = {
    CharInput: _on_char,
    Backspace: _on_backspace,
    MoveUp: _on_up,
    MoveDown: _on_down,
    SwitchMode: _on_switch_mode,
    NextMode: _on_next_mode,
    PrevMode: _on_prev_mode,
    ToggleFilter: _on_toggle_filter,
    Enter: _on_enter,
    Quit: _on_quit,
    EditRequested: _on_edit,
    ReloadRequested: _on_reload,
    DescribeRequested: _on_describe,
}


def transition(state: NavigationState, event: Event, ctx: NavigationContext) -> Transition:
    """Apply one event. Pure: returns the next state and the effects for the host."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unsupported navigation event: {event!r}")
    return handler(state, event, ctx)
