from __future__ import annotations

import threading
from dataclasses import asdict
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config import settings
from .errors import HostInteractionError, ResolutionError, UnknownBookmarkError
from .filters import FilterMode, filter_rows
from .keybindings import KeyEvent
from .logging_utils import setup_logger
from .navigation import DeliverCommand, Describe, Effect
from .presentation.presenters import create_presenter
from .security import require_api_key
from .session import BookmarkSession


app = FastAPI(title="zbookmarks host adapter", version="0.1.0")

origins = [o.strip() for o in settings.cors_origins.split(",")] if settings.cors_origins else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = setup_logger("zbookmarks.api", settings.log_level)

_session: Optional[BookmarkSession] = None
_session_lock = threading.Lock()


def get_session() -> BookmarkSession:
    """Process-wide session, opened on first use from the configured document path."""
    global _session
    with _session_lock:
        if _session is None:
            _session = BookmarkSession.open(settings.bookmarks_path(), settings)
            logger.info(f"🚀 Session {_session.session_id} opened on {_session.path}")
        return _session


class KeyPayload(BaseModel):
    key: str
    modifiers: List[str] = []


def _effect_payload(effect: Effect, session: BookmarkSession) -> dict:
    data = effect.to_dict()
    if isinstance(effect, DeliverCommand):
        data["payload"] = effect.payload
    elif isinstance(effect, Describe):
        row = session.selected()
        if row is not None:
            data["markdown"] = create_presenter("describe").to_markdown(row)
    return data


@app.get("/health")
def health(response: Response):
    response.headers["Cache-Control"] = "no-store"
    return {
        "status": "ok",
        "service": "zbookmarks",
        "version": "0.1.0",
        "time": datetime.now().astimezone().isoformat()
    }


@app.get("/bookmarks", dependencies=[Depends(require_api_key)])
def bookmarks(
    q: str = Query(default=""),
    mode: FilterMode = Query(default=FilterMode.NAME),
    session: BookmarkSession = Depends(get_session),
):
    generation = session.generation
    index = generation.index
    rows = filter_rows(index.bookmarks, mode, q, session.ignore_case)
    return {
        "generation": generation.number,
        "q": q,
        "mode": mode.value,
        "bookmarks": [asdict(r) for r in rows],
        "failures": [asdict(f) for f in index.failures],
        "markdown": create_presenter("bookmarks").to_markdown(rows, index.failures),
    }


@app.get("/labels", dependencies=[Depends(require_api_key)])
def labels(
    q: str = Query(default=""),
    mode: FilterMode = Query(default=FilterMode.NAME),
    session: BookmarkSession = Depends(get_session),
):
    if mode == FilterMode.LABEL:
        raise HTTPException(400, detail="Label filtering is only available for bookmarks")
    rows = filter_rows(session.generation.index.labels, mode, q, session.ignore_case)
    return {"q": q, "mode": mode.value, "labels": [asdict(r) for r in rows]}


@app.get("/bookmarks/{name}/command", dependencies=[Depends(require_api_key)])
def bookmark_command(name: str, session: BookmarkSession = Depends(get_session)):
    try:
        resolved = session.generation.cache.get(name)
    except UnknownBookmarkError as e:
        raise HTTPException(404, detail=str(e))
    except ResolutionError as e:
        raise HTTPException(422, detail={"error": type(e).__name__, "message": str(e)})
    effect = DeliverCommand(text=resolved.command, exec=resolved.exec)
    return {"name": resolved.name, "command": resolved.command, "exec": resolved.exec, "payload": effect.payload}


@app.get("/errors", dependencies=[Depends(require_api_key)])
def errors(session: BookmarkSession = Depends(get_session)):
    return {
        "error": session.error_message,
        "failures": [asdict(f) for f in session.generation.index.failures],
    }


@app.get("/usage", dependencies=[Depends(require_api_key)])
def usage(session: BookmarkSession = Depends(get_session)):
    presenter = create_presenter("usage")
    return {
        "rows": presenter.rows(session.keybindings),
        "markdown": presenter.to_markdown(session.keybindings),
    }


@app.get("/session", dependencies=[Depends(require_api_key)])
def session_state(session: BookmarkSession = Depends(get_session)):
    return session.snapshot()


@app.post("/session/keys", dependencies=[Depends(require_api_key)])
def session_key(payload: KeyPayload, session: BookmarkSession = Depends(get_session)):
    try:
        key = KeyEvent.from_payload(payload.key, payload.modifiers)
    except HostInteractionError as e:
        logger.warning(f"⚠️ Rejected key payload: {e}")
        raise HTTPException(400, detail=str(e))

    with session.lock:
        effects = session.handle_key(key)
        return {
            "effects": [_effect_payload(e, session) for e in effects],
            "state": session.snapshot(),
        }


@app.post("/reload", dependencies=[Depends(require_api_key)])
def reload(session: BookmarkSession = Depends(get_session)):
    with session.lock:
        if not session.reload():
            raise HTTPException(409, detail=session.error_message)
        return session.snapshot()
