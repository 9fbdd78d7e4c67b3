from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from .moves import count_available_moves
from .outcomes import GAME_ENDED, Event
from .state import (
    GameSession,
    ResultRecord,
    RESULT_LOSE,
    RESULT_WIN,
    REASON_GRID_OVERFLOW,
    REASON_NO_MOVES,
    REASON_TARGET_REACHED,
)

log = logging.getLogger(__name__)


def _finish(session: GameSession, result: str, reason: str) -> None:
    session.finished = True
    session.result = result
    session.end_reason = reason
    session.selection.clear()
    log.info('game ended: mode=%s result=%s reason=%s score=%d moves=%d',
             session.mode, result, reason, session.score, session.move_count)


def evaluate_lifecycle(session: GameSession) -> Tuple[Event, ...]:
    """
    Runs the Active -> Win/Lose checks after a successful action.

    Win when the target score is reached; otherwise lose when no valid pair
    remains and every tool quota is spent, or when the grid has grown past
    the row limit. Returns a game_ended event carrying the ResultRecord when
    a transition happens.
    """
    if session.finished:
        return ()
    cfg = session.config
    if session.score >= cfg.target_score:
        _finish(session, RESULT_WIN, REASON_TARGET_REACHED)
    else:
        available = count_available_moves(session.board, cap=cfg.hint_display_cap)
        if available == 0 and session.quotas_left() == 0:
            _finish(session, RESULT_LOSE, REASON_NO_MOVES)
        elif session.board.rows > cfg.max_rows:
            _finish(session, RESULT_LOSE, REASON_GRID_OVERFLOW)
    if not session.finished:
        return ()
    return (Event(GAME_ENDED, on_game_ended(session)),)


def on_game_ended(session: GameSession, finished_at: Optional[str] = None) -> ResultRecord:
    """Builds the record a results log keeps for a finished session."""
    if not session.finished or session.result is None:
        raise ValueError('session has not finished')
    if finished_at is None:
        finished_at = datetime.now(timezone.utc).isoformat(timespec='seconds')
    return ResultRecord(
        mode=session.mode,
        score=session.score,
        result=session.result,
        elapsed_time=session.elapsed(),
        move_count=session.move_count,
        finished_at=finished_at,
    )
