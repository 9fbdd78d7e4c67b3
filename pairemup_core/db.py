from __future__ import annotations

import json
import logging
import os
import random
import sqlite3
import tempfile
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from .codec import deserialize, serialize
from .state import GameSession, ResultRecord

log = logging.getLogger(__name__)

RESULTS_KEPT = 20


def _ensure_db_dir(db_path: str) -> None:
    """Ensures the directory for the SQLite DB exists before connecting."""
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_db_path(db_path: str) -> str:
    """Resolves a potentially unwritable DB path to a writable one, creating the directory if needed."""
    try:
        _ensure_db_dir(db_path)
        return db_path
    except PermissionError:
        pass
    candidates = [
        os.getenv('PAIREMUP_DB_DIR'),
        os.path.join(os.getcwd(), 'data'),
        tempfile.gettempdir(),
    ]
    base = os.path.basename(db_path) or 'pairemup.db'
    for d in candidates:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
        except OSError:
            continue
        log.warning('database directory for %s not writable; using %s', db_path, d)
        return os.path.join(d, base)
    return base


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='seconds')


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the saved-session and results tables exist."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS sessions (
            id TEXT PRIMARY KEY,
            mode TEXT NOT NULL,
            payload TEXT NOT NULL,
            elapsed INTEGER NOT NULL,
            saved_at TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS results (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            mode TEXT NOT NULL,
            score INTEGER NOT NULL,
            result TEXT NOT NULL,
            elapsed INTEGER NOT NULL,
            moves INTEGER NOT NULL,
            finished_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def _connect(db_path: str) -> sqlite3.Connection:
    resolved = _resolve_db_path(db_path)
    _ensure_db_dir(resolved)
    conn = sqlite3.connect(resolved)
    _ensure_db(conn)
    return conn


def save_session(db_path: str, session_id: str, session: GameSession, elapsed: int = 0) -> None:
    """Stores (or replaces) a serialized session under an id."""
    payload = json.dumps(serialize(session))
    conn = _connect(db_path)
    try:
        conn.execute(
            "INSERT OR REPLACE INTO sessions (id, mode, payload, elapsed, saved_at) VALUES (?, ?, ?, ?, ?)",
            (session_id, session.mode, payload, int(elapsed), _now()),
        )
        conn.commit()
    finally:
        conn.close()
    log.debug('saved session %s (%d bytes)', session_id, len(payload))


def load_session(db_path: str, session_id: str, rng: Optional[random.Random] = None) -> Optional[Tuple[GameSession, int]]:
    """Loads a saved session and its elapsed seconds, or None if nothing is stored under the id."""
    conn = _connect(db_path)
    try:
        row = conn.execute("SELECT payload, elapsed FROM sessions WHERE id = ?", (session_id,)).fetchone()
    finally:
        conn.close()
    if not row:
        return None
    payload, elapsed = row
    return deserialize(json.loads(payload), rng=rng), int(elapsed)


def delete_session(db_path: str, session_id: str) -> bool:
    conn = _connect(db_path)
    try:
        cur = conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
        conn.commit()
        return cur.rowcount > 0
    finally:
        conn.close()


def append_result(db_path: str, record: ResultRecord) -> None:
    """Appends a finished-game record, keeping only the most recent RESULTS_KEPT."""
    conn = _connect(db_path)
    try:
        conn.execute(
            """
            INSERT INTO results (mode, score, result, elapsed, moves, finished_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (record.mode, record.score, record.result, record.elapsed_time, record.move_count, record.finished_at),
        )
        conn.execute(
            "DELETE FROM results WHERE seq NOT IN (SELECT seq FROM results ORDER BY seq DESC LIMIT ?)",
            (RESULTS_KEPT,),
        )
        conn.commit()
    finally:
        conn.close()


def recent_results(db_path: str, limit: int = RESULTS_KEPT) -> List[ResultRecord]:
    """Returns stored results, newest first."""
    conn = _connect(db_path)
    try:
        rows = conn.execute(
            "SELECT mode, score, result, elapsed, moves, finished_at FROM results ORDER BY seq DESC LIMIT ?",
            (int(limit),),
        ).fetchall()
    finally:
        conn.close()
    return [
        ResultRecord(mode=m, score=int(s), result=r, elapsed_time=int(e), move_count=int(mv), finished_at=f)
        for (m, s, r, e, mv, f) in rows
    ]


def clear_results(db_path: str) -> None:
    conn = _connect(db_path)
    try:
        conn.execute("DELETE FROM results")
        conn.commit()
    finally:
        conn.close()
