import sys
import threading

from zbookmarks.keybindings import KeyEvent
from zbookmarks.navigation import DeliverCommand, Exit, Mode, NavigationState, OpenEditor, Reload
from zbookmarks.session import BookmarkSession


def press(session, name, *modifiers):
    return session.handle_key(KeyEvent.from_payload(name, modifiers))


def visible(session):
    return [r.name for r in session.visible_rows()]


class TestOpen:
    def test_loads_first_generation(self, session):
        assert session.generation.number == 1
        assert visible(session) == ["alpha", "beta", "greet"]
        assert session.error_message is None

    def test_creates_missing_document(self, tmp_path, settings):
        path = tmp_path / "fresh.yaml"
        session = BookmarkSession.open(path, settings)
        assert path.exists()
        assert session.visible_rows() == []
        assert session.error_message is None

    def test_broken_document_starts_empty(self, tmp_path, settings):
        path = tmp_path / "broken.yaml"
        path.write_text("bookmarks: [", encoding="utf-8")
        session = BookmarkSession.open(path, settings)
        assert session.generation.number == 0
        assert session.visible_rows() == []
        assert "Failed to load config file" in session.error_message

    def test_bad_keybinding_falls_back_to_defaults(self, bookmarks_file, settings):
        settings.bind_edit = "nonsense"
        session = BookmarkSession.open(bookmarks_file, settings)
        assert str(session.keybindings.edit) == "Ctrl e"
        assert "keybindings" in session.error_message


class TestKeys:
    def test_enter_delivers(self, session):
        for c in "gre":
            press(session, c)
        effects = press(session, "Enter")
        assert effects == [DeliverCommand(text="echo local", exec=False), Exit()]

    def test_edit_opens_document(self, session, bookmarks_file):
        assert press(session, "e", "Ctrl") == [OpenEditor(path=str(bookmarks_file))]

    def test_unbound_key_does_nothing(self, session):
        assert press(session, "x", "Alt") == []
        assert session.state == NavigationState.initial()

    def test_mode_switch(self, session):
        press(session, "2", "Ctrl")
        assert session.state.mode == Mode.LABELS
        assert visible(session) == ["files", "tmp", "nav"]


class TestReload:
    def test_reload_picks_up_changes_and_resets_state(self, session, bookmarks_file):
        press(session, "a")
        press(session, "Down")
        bookmarks_file.write_text("bookmarks:\n  - {name: solo, cmds: [pwd]}\n", encoding="utf-8")

        effects = press(session, "r", "Ctrl")

        assert effects == [Reload()]
        assert session.generation.number == 2
        assert session.state == NavigationState.initial()
        assert visible(session) == ["solo"]

    def test_parse_error_keeps_previous_generation(self, session, bookmarks_file):
        press(session, "a")
        bookmarks_file.write_text("bookmarks: [", encoding="utf-8")

        assert session.reload() is False

        assert session.generation.number == 1
        assert session.state.filter_text == "a"
        assert visible(session) == ["alpha", "beta"]
        assert session.generation.cache.get("alpha").command == "ls /tmp"
        assert "Failed to load config file" in session.error_message

    def test_failed_reload_from_key_reports_error(self, session, bookmarks_file, caplog):
        press(session, "a")
        bookmarks_file.write_text("bookmarks: [", encoding="utf-8")

        effects = press(session, "r", "Ctrl")

        assert len(effects) == 1
        assert effects[0].ok is False
        assert "Failed to load config file" in effects[0].error
        assert any("Key Ctrl r" in r.getMessage() and r.levelname == "WARNING" for r in caplog.records)
        assert session.generation.number == 1
        assert session.state.filter_text == "a"

    def test_duplicate_names_keep_previous_generation(self, session, bookmarks_file):
        bookmarks_file.write_text(
            "bookmarks:\n  - {name: x, cmds: [ls]}\n  - {name: x, cmds: [ls]}\n", encoding="utf-8"
        )
        assert session.reload() is False
        assert visible(session) == ["alpha", "beta", "greet"]
        assert "Duplicate" in session.error_message

    def test_successful_reload_clears_error(self, session, bookmarks_file):
        text = bookmarks_file.read_text(encoding="utf-8")
        bookmarks_file.write_text("bookmarks: [", encoding="utf-8")
        session.reload()
        bookmarks_file.write_text(text, encoding="utf-8")
        assert session.reload() is True
        assert session.error_message is None
        assert session.generation.number == 2


class TestSnapshot:
    def test_snapshot(self, session):
        press(session, "2")
        snapshot = session.snapshot()
        assert snapshot["filter_mode"] == "ID"
        assert snapshot["rows"] == [{"id": 2, "name": "beta"}]
        assert snapshot["mode"] == "Bookmarks"


class TestConcurrency:
    def test_keys_from_many_threads_are_not_lost(self, session):
        threads_count, presses = 8, 200

        def worker():
            for _ in range(presses):
                press(session, "a")

        interval = sys.getswitchinterval()
        sys.setswitchinterval(1e-6)
        try:
            threads = [threading.Thread(target=worker) for _ in range(threads_count)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()
        finally:
            sys.setswitchinterval(interval)

        assert len(session.state.filter_text) == threads_count * presses

    def test_reload_while_typing_keeps_state_consistent(self, session):
        def typist():
            for _ in range(100):
                press(session, "a")
                session.snapshot()

        def reloader():
            for _ in range(20):
                session.reload()

        threads = [threading.Thread(target=typist), threading.Thread(target=reloader)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert session.generation.number == 21
        assert session.error_message is None
