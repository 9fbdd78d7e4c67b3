from __future__ import annotations

import logging
import os
import sys
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

# Ensure package imports work when executed directly from repo root or as module
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

try:
    from .game import (  # type: ignore
        EngineConfig,
        GameSession,
        GAME_ENDED,
        Outcome,
        serialize,
        new_session,
        select_cell,
        use_tool,
        undo,
        hint,
        save_session,
        load_session,
        append_result,
        recent_results,
    )
except ImportError:
    from game import (  # type: ignore
        EngineConfig,
        GameSession,
        GAME_ENDED,
        Outcome,
        serialize,
        new_session,
        select_cell,
        use_tool,
        undo,
        hint,
        save_session,
        load_session,
        append_result,
        recent_results,
    )

DEFAULT_DB = os.getenv("PAIREMUP_DB", "data/pairemup.db")

log = logging.getLogger(__name__)

app = Flask(__name__)


@dataclass
class _Slot:
    """One live session behind its own lock; the lock makes each session single-writer."""
    session: GameSession
    started: float = field(default_factory=time.monotonic)
    offset: int = 0
    stopped: Optional[int] = None
    last_used: float = field(default_factory=time.monotonic)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def elapsed(self) -> int:
        if self.stopped is not None:
            return self.stopped
        return self.offset + int(time.monotonic() - self.started)

    def stop(self) -> None:
        """Freezes the timer; a finished game no longer accrues time."""
        if self.stopped is None:
            self.stopped = self.elapsed()


MAX_SESSIONS = int(os.getenv("PAIREMUP_MAX_SESSIONS", "1000"))
SESSION_TTL = float(os.getenv("PAIREMUP_SESSION_TTL", "3600"))

_SESSIONS: "OrderedDict[str, _Slot]" = OrderedDict()
_REGISTRY_LOCK = threading.Lock()


def _evict_locked(now: float) -> None:
    # caller holds _REGISTRY_LOCK; least recently used slots sit at the front
    for sid in [k for k, s in _SESSIONS.items() if now - s.last_used > SESSION_TTL]:
        del _SESSIONS[sid]
        log.debug("evicted idle session %s", sid)
    while len(_SESSIONS) > MAX_SESSIONS:
        sid, _ = _SESSIONS.popitem(last=False)
        log.debug("evicted session %s (registry full)", sid)


def _register(session: GameSession, session_id: Optional[str] = None, offset: int = 0) -> Tuple[str, _Slot]:
    sid = session_id or uuid.uuid4().hex
    slot = _Slot(session=session, offset=offset)
    session.elapsed_source = slot.elapsed
    if session.finished:
        slot.stop()
    with _REGISTRY_LOCK:
        _SESSIONS.pop(sid, None)
        _SESSIONS[sid] = slot
        _evict_locked(time.monotonic())
    return sid, slot


def _lookup(sid: Any) -> Optional[_Slot]:
    if not isinstance(sid, str):
        return None
    with _REGISTRY_LOCK:
        slot = _SESSIONS.get(sid)
        if slot is not None:
            slot.last_used = time.monotonic()
            _SESSIONS.move_to_end(sid)
        return slot


def _drop(sid: Any) -> bool:
    if not isinstance(sid, str):
        return False
    with _REGISTRY_LOCK:
        return _SESSIONS.pop(sid, None) is not None


def session_to_json(sid: str, slot: _Slot) -> Dict[str, Any]:
    s = slot.session
    h = hint(s)
    return {
        "sessionId": sid,
        "session": serialize(s),
        "rows": s.board.rows,
        "elapsed": slot.elapsed(),
        "availableMoves": h.available,
        "availableText": h.text,
    }


def outcome_to_json(o: Outcome) -> Dict[str, Any]:
    events = []
    for e in o.events:
        payload = e.payload.to_dict() if hasattr(e.payload, "to_dict") else e.payload
        events.append({"name": e.name, "payload": payload})
    return {
        "kind": o.kind,
        "cells": list(o.cells),
        "gained": o.gained,
        "added": list(o.added),
        "tool": o.tool,
        "events": events,
    }


def _respond(sid: str, slot: _Slot, o: Outcome) -> Any:
    ended = o.event(GAME_ENDED)
    if ended is not None:
        # the timer stops at the moment the record was taken
        slot.stopped = ended.payload.elapsed_time
        append_result(DEFAULT_DB, ended.payload)
    body = {"ok": o.ok, "outcome": outcome_to_json(o), "state": session_to_json(sid, slot)}
    return jsonify(body), (200 if o.ok else 400)


def _body() -> Dict[str, Any]:
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else {}


def _not_found(sid: Any) -> Any:
    return jsonify({"ok": False, "error": f"unknown session: {sid}"}), 404


# ---------- Core Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = _body()
    mode = str(body.get("mode", "classic"))
    seed = body.get("seed", None)
    try:
        config = EngineConfig.from_dict(body.get("config") or {})
        session = new_session(mode, config=config, seed=seed)
    except (AttributeError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    sid, slot = _register(session)
    log.info("new %s session %s", mode, sid)
    return jsonify({"ok": True, "state": session_to_json(sid, slot)})


@app.post("/api/state")
def api_state() -> Any:
    sid = _body().get("sessionId")
    slot = _lookup(sid)
    if slot is None:
        return _not_found(sid)
    with slot.lock:
        return jsonify({"ok": True, "state": session_to_json(sid, slot)})


@app.post("/api/select")
def api_select() -> Any:
    body = _body()
    sid = body.get("sessionId")
    slot = _lookup(sid)
    if slot is None:
        return _not_found(sid)
    with slot.lock:
        try:
            o = select_cell(slot.session, body.get("index"))
        except IndexError as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        return _respond(sid, slot, o)


@app.post("/api/tool")
def api_tool() -> Any:
    body = _body()
    sid = body.get("sessionId")
    slot = _lookup(sid)
    if slot is None:
        return _not_found(sid)
    with slot.lock:
        try:
            o = use_tool(slot.session, str(body.get("tool")), body.get("target"))
        except (IndexError, ValueError) as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        return _respond(sid, slot, o)


@app.post("/api/undo")
def api_undo() -> Any:
    sid = _body().get("sessionId")
    slot = _lookup(sid)
    if slot is None:
        return _not_found(sid)
    with slot.lock:
        return _respond(sid, slot, undo(slot.session))


@app.post("/api/hint")
def api_hint() -> Any:
    sid = _body().get("sessionId")
    slot = _lookup(sid)
    if slot is None:
        return _not_found(sid)
    with slot.lock:
        h = hint(slot.session)
    return jsonify({
        "ok": True,
        "availableMoves": h.available,
        "availableText": h.text,
        "pair": list(h.pair) if h.pair else None,
    })


@app.post("/api/end")
def api_end() -> Any:
    sid = _body().get("sessionId")
    if not _drop(sid):
        return _not_found(sid)
    return jsonify({"ok": True, "sessionId": sid})


# ---------- Persistence API ----------

@app.post("/api/save")
def api_save() -> Any:
    sid = _body().get("sessionId")
    slot = _lookup(sid)
    if slot is None:
        return _not_found(sid)
    with slot.lock:
        save_session(DEFAULT_DB, sid, slot.session, slot.elapsed())
    return jsonify({"ok": True, "sessionId": sid})


@app.post("/api/load")
def api_load() -> Any:
    sid = _body().get("sessionId")
    if not isinstance(sid, str) or not sid:
        return jsonify({"ok": False, "error": "sessionId required"}), 400
    try:
        loaded = load_session(DEFAULT_DB, sid)
    except ValueError as e:
        return jsonify({"ok": False, "error": f"bad saved session: {e}"}), 500
    if loaded is None:
        return _not_found(sid)
    session, elapsed = loaded
    sid, slot = _register(session, session_id=sid, offset=elapsed)
    return jsonify({"ok": True, "state": session_to_json(sid, slot)})


@app.get("/api/results")
def api_results() -> Any:
    try:
        limit = int(request.args.get("limit", 20))
    except ValueError:
        return jsonify({"ok": False, "error": "limit must be an integer"}), 400
    records = recent_results(DEFAULT_DB, limit=max(1, limit))
    return jsonify({"ok": True, "results": [r.to_dict() for r in records]})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("PAIREMUP_LOG_LEVEL", "INFO").upper())
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=debug)
