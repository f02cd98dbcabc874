from __future__ import annotations

import threading
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional

from .cache import ResolutionCache
from .config import Settings
from .document import create_if_missing, load_document
from .errors import DocumentError, KeybindingError
from .filters import FilterMode
from .index import EntryIndex
from .keybindings import KeyEvent, Keybindings
from .logging_utils import create_session_id, log_transition, measure_time, setup_logger
from .models import ConfigModel
from .navigation import (
    Effect,
    Event,
    NavigationContext,
    NavigationState,
    Reload,
    active_filter_mode,
    selected_row,
    transition,
    visible_rows,
)


@dataclass(frozen=True)
class Generation:
    """One consistent snapshot: document, resolved cache and entry index."""
    number: int
    config: ConfigModel
    cache: ResolutionCache
    index: EntryIndex

    @classmethod
    def build(cls, config: ConfigModel, number: int, default_exec: bool = False) -> "Generation":
        cache = ResolutionCache.build(config, default_exec=default_exec)
        return cls(number=number, config=config, cache=cache, index=EntryIndex.build(config, cache))

    @classmethod
    def empty(cls) -> "Generation":
        return cls.build(ConfigModel(), number=0)


class BookmarkSession:
    """Live browsing session over the bookmarks document.

    Owns the current generation and the navigation state. Key events are
    processed one at a time to completion under ``lock``; the HTTP adapter
    calls in from several worker threads. Reload builds the next generation
    aside and swaps it in only when the whole build succeeded.
    """

    def __init__(self,
                 path: Path,
                 generation: Generation,
                 *,
                 default_exec: bool = False,
                 ignore_case: bool = True,
                 autodetect: bool = True,
                 keybindings: Optional[Keybindings] = None,
                 error_message: Optional[str] = None):
        self.path = Path(path)
        self.generation = generation
        self.default_exec = default_exec
        self.ignore_case = ignore_case
        self.autodetect = autodetect
        self.keybindings = keybindings or Keybindings()
        self.state = NavigationState.initial()
        self.error_message = error_message
        self.session_id = create_session_id()
        self.logger = setup_logger("zbookmarks.session")
        # re-entrant: handle_key reaches reload through dispatch
        self.lock = threading.RLock()

    @classmethod
    def open(cls, path: Path, settings: Optional[Settings] = None) -> "BookmarkSession":
        """Create the document if needed and load the first generation.

        A broken document or keybinding configuration does not prevent the
        session from starting; the problem is kept in ``error_message``.
        """
        settings = settings or Settings()
        path = Path(path)
        errors = []

        try:
            keybindings = Keybindings.from_config(settings.keybinding_config())
        except KeybindingError as e:
            errors.append(f"Failed to parse keybindings, check your config: {e}. Default is used.")
            keybindings = Keybindings()

        generation = Generation.empty()
        try:
            create_if_missing(path)
            generation = Generation.build(load_document(path), number=1, default_exec=settings.exec)
        except OSError as e:
            errors.append(f"Failed to create file '{path}': {e}.")
        except DocumentError as e:
            errors.append(str(e))

        session = cls(
            path,
            generation,
            default_exec=settings.exec,
            ignore_case=settings.ignore_case,
            autodetect=settings.autodetect_filter_mode,
            keybindings=keybindings,
            error_message=" ".join(errors) or None,
        )
        for message in errors:
            session.logger.error(message)
        return session

    @property
    def context(self) -> NavigationContext:
        return NavigationContext(
            index=self.generation.index,
            ignore_case=self.ignore_case,
            autodetect=self.autodetect,
            path=str(self.path),
        )

    def visible_rows(self) -> list:
        return visible_rows(self.state, self.context)

    def selected(self):
        return selected_row(self.state, self.context)

    def active_filter_mode(self) -> FilterMode:
        return active_filter_mode(self.state, self.context)

    @measure_time
    def _build_next(self) -> Generation:
        config = load_document(self.path)
        return Generation.build(config, number=self.generation.number + 1, default_exec=self.default_exec)

    def reload(self) -> bool:
        """Rebuild document, cache and index; keep the old generation on failure."""
        with self.lock:
            try:
                generation, duration_ms = self._build_next()
            except DocumentError as e:
                self.error_message = str(e)
                self.logger.error(f"❌ Reload failed, keeping generation {self.generation.number}: {e}")
                return False

            previous = self.generation
            self.generation = generation
            previous.cache.invalidate_all()
            self.state = NavigationState.initial()
            self.error_message = None
            self.logger.info(
                f"🔄 Reloaded {self.path} as generation {generation.number} in {duration_ms:.1f}ms "
                f"({len(generation.index.bookmarks)} bookmarks, {len(generation.index.failures)} failed)"
            )
            return True

    def dispatch(self, event: Event) -> List[Effect]:
        """Apply one event; a ``Reload`` is performed here and comes back with its outcome."""
        with self.lock:
            self.state, effects = transition(self.state, event, self.context)
            done = []
            for effect in effects:
                if isinstance(effect, Reload):
                    ok = self.reload()
                    effect = replace(effect, ok=ok, error=None if ok else self.error_message)
                done.append(effect)
            return done

    def handle_key(self, key: KeyEvent) -> List[Effect]:
        """Process one key press and return the effects the host must carry out."""
        with self.lock:
            start_time = time.time()
            event = self.keybindings.decode(key)
            effects = self.dispatch(event) if event is not None else []
            failed = next((e.error for e in effects if isinstance(e, Reload) and not e.ok), None)

            log_transition(
                self.logger, self.session_id, str(key),
                str(self.state.mode), str(self.active_filter_mode()), self.state.filter_text,
                len(self.visible_rows()), self.state.selection,
                (time.time() - start_time) * 1000, effects,
                error=failed,
            )
            return effects

    def snapshot(self) -> dict:
        with self.lock:
            return {
                "generation": self.generation.number,
                "mode": str(self.state.mode),
                "filter_mode": str(self.active_filter_mode()),
                "filter": self.state.filter_text,
                "selection": self.state.selection,
                "rows": [{"id": r.id, "name": r.name} for r in self.visible_rows()],
                "error": self.error_message,
            }
