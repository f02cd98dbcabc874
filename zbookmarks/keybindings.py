from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Mapping, Optional

from .errors import HostInteractionError, KeybindingError
from .filters import FilterMode
from .navigation import (
    Backspace,
    CharInput,
    DescribeRequested,
    EditRequested,
    Enter,
    Event,
    Mode,
    MoveDown,
    MoveUp,
    NextMode,
    PrevMode,
    Quit,
    ReloadRequested,
    SwitchMode,
    ToggleFilter,
)

MODIFIERS = ("Ctrl", "Alt", "Shift", "Super")
BARE_KEYS = ("Esc", "Enter", "Backspace", "Tab", "Up", "Down", "Left", "Right")


def _modifier(name: str) -> str:
    for known in MODIFIERS:
        if known.lower() == name.strip().lower():
            return known
    raise KeybindingError(f"Unknown key modifier: {name}")


@dataclass(frozen=True)
class KeyEvent:
    """One key press as delivered by the host."""
    key: str
    modifiers: FrozenSet[str] = frozenset()

    @classmethod
    def from_payload(cls, key: str, modifiers: Iterable[str] = ()) -> "KeyEvent":
        """Build a key event from host input, rejecting names we cannot map."""
        if len(key) != 1 and key not in BARE_KEYS:
            raise HostInteractionError(f"Unknown key: {key!r}")
        try:
            mods = frozenset(_modifier(m) for m in modifiers)
        except KeybindingError as e:
            raise HostInteractionError(str(e)) from e
        return cls(key=key, modifiers=mods)

    def has_only(self, modifier: str) -> bool:
        return self.modifiers == frozenset({modifier})

    def __str__(self) -> str:
        return " ".join(sorted(self.modifiers) + [self.key])


@dataclass(frozen=True)
class Keybinding:
    modifier: str
    char: str

    @classmethod
    def parse(cls, binding: str) -> "Keybinding":
        """Parse a chord such as ``"Ctrl e"``."""
        parts = binding.split()
        if len(parts) != 2:
            raise KeybindingError(f"Invalid keybinding format: {binding}")
        return cls(modifier=_modifier(parts[0]), char=parts[1][0])

    def matches(self, key: KeyEvent) -> bool:
        return key.key == self.char and key.has_only(self.modifier)

    def __str__(self) -> str:
        return f"{self.modifier} {self.char}"


CTRL_C = Keybinding("Ctrl", "c")


@dataclass(frozen=True)
class Keybindings:
    edit: Keybinding = field(default_factory=lambda: Keybinding("Ctrl", "e"))
    reload: Keybinding = field(default_factory=lambda: Keybinding("Ctrl", "r"))
    switch_filter_label: Keybinding = field(default_factory=lambda: Keybinding("Ctrl", "l"))
    switch_filter_id: Keybinding = field(default_factory=lambda: Keybinding("Ctrl", "i"))
    describe: Keybinding = field(default_factory=lambda: Keybinding("Ctrl", "d"))

    @classmethod
    def from_config(cls, conf: Mapping[str, Optional[str]]) -> "Keybindings":
        """Override the defaults with the non-empty chords in ``conf``.

        Keys are the action names (``edit``, ``reload``, ...). Raises
        ``KeybindingError`` on the first chord that does not parse.
        """
        overrides = {}
        for action in ("edit", "reload", "switch_filter_label", "switch_filter_id", "describe"):
            value = conf.get(action)
            if value:
                overrides[action] = Keybinding.parse(value)
        return cls(**overrides)

    def decode(self, key: KeyEvent) -> Optional[Event]:
        """Map a raw key to a navigation event; ``None`` for unbound keys."""
        plain = not key.modifiers

        # not configurable
        if (key.key == "Esc" and plain) or CTRL_C.matches(key):
            return Quit()
        if plain and key.key in ("Down", "Tab"):
            return MoveDown()
        if plain and key.key == "Up":
            return MoveUp()
        if plain and key.key == "Right":
            return NextMode()
        if plain and key.key == "Left":
            return PrevMode()
        if plain and key.key == "Backspace":
            return Backspace()
        if plain and key.key == "Enter":
            return Enter()
        if key.has_only("Ctrl") and key.key.isascii() and key.key.isdigit():
            if int(key.key) in {m.value for m in Mode}:
                return SwitchMode(Mode(int(key.key)))
            return None
        if plain and len(key.key) == 1:
            return CharInput(key.key)

        # configurable
        if self.edit.matches(key):
            return EditRequested()
        if self.reload.matches(key):
            return ReloadRequested()
        if self.switch_filter_label.matches(key):
            return ToggleFilter(FilterMode.LABEL)
        if self.switch_filter_id.matches(key):
            return ToggleFilter(FilterMode.ID)
        if self.describe.matches(key):
            return DescribeRequested()
        return None
