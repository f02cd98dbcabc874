import pytest

from zbookmarks.errors import HostInteractionError, KeybindingError
from zbookmarks.filters import FilterMode
from zbookmarks.keybindings import KeyEvent, Keybinding, Keybindings
from zbookmarks.navigation import (
    Backspace,
    CharInput,
    DescribeRequested,
    EditRequested,
    Enter,
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


def key(name, *modifiers):
    return KeyEvent.from_payload(name, modifiers)


class TestKeybinding:
    def test_parse(self):
        assert Keybinding.parse("Ctrl e") == Keybinding("Ctrl", "e")

    def test_modifier_is_case_insensitive(self):
        assert Keybinding.parse("alt x") == Keybinding("Alt", "x")

    @pytest.mark.parametrize("binding", ["Ctrl", "Ctrl e f", "Hyper e"])
    def test_invalid(self, binding):
        with pytest.raises(KeybindingError):
            Keybinding.parse(binding)

    def test_from_config_overrides_only_given(self):
        bindings = Keybindings.from_config({"edit": "Alt e", "reload": ""})
        assert str(bindings.edit) == "Alt e"
        assert str(bindings.reload) == "Ctrl r"


class TestDecode:
    @pytest.mark.parametrize("event, expected", [
        (("Esc",), Quit()),
        (("c", "Ctrl"), Quit()),
        (("Down",), MoveDown()),
        (("Tab",), MoveDown()),
        (("Up",), MoveUp()),
        (("Right",), NextMode()),
        (("Left",), PrevMode()),
        (("Backspace",), Backspace()),
        (("Enter",), Enter()),
        (("2", "Ctrl"), SwitchMode(Mode.LABELS)),
        (("a",), CharInput("a")),
        (("7",), CharInput("7")),
        (("e", "Ctrl"), EditRequested()),
        (("r", "Ctrl"), ReloadRequested()),
        (("l", "Ctrl"), ToggleFilter(FilterMode.LABEL)),
        (("i", "Ctrl"), ToggleFilter(FilterMode.ID)),
        (("d", "Ctrl"), DescribeRequested()),
    ])
    def test_default_bindings(self, event, expected):
        assert Keybindings().decode(key(*event)) == expected

    def test_unbound_keys(self):
        assert Keybindings().decode(key("9", "Ctrl")) is None
        assert Keybindings().decode(key("z", "Alt")) is None

    def test_custom_binding(self):
        bindings = Keybindings.from_config({"describe": "Alt d"})
        assert bindings.decode(key("d", "Alt")) == DescribeRequested()
        assert bindings.decode(key("d", "Ctrl")) is None


class TestKeyEvent:
    def test_unknown_key_name(self):
        with pytest.raises(HostInteractionError):
            KeyEvent.from_payload("F13")

    def test_unknown_modifier(self):
        with pytest.raises(HostInteractionError):
            KeyEvent.from_payload("a", ["Hyper"])

    def test_str(self):
        assert str(key("e", "ctrl")) == "Ctrl e"
