from __future__ import annotations

import logging
from typing import Optional

from .config import ADD_NUMBERS, ERASER, SHUFFLE, TOOLS
from .deal import draw_supply, supply_size
from .lifecycle import evaluate_lifecycle
from .outcomes import (
    GRID_OVERFLOW,
    NOTHING_TO_ERASE,
    NOTHING_TO_UNDO,
    SESSION_CHANGED,
    SESSION_FINISHED,
    TOOL_EXHAUSTED,
    TOOL_USED,
    UNDONE,
    Event,
    Outcome,
    failure,
)
from .state import GameSession

log = logging.getLogger(__name__)


def use_tool(session: GameSession, tool: str, target: Optional[int] = None) -> Outcome:
    """
    Runs one quota-limited tool.

    A spent quota, a full grid or an empty eraser target is reported as a
    failure outcome and leaves the session untouched. On success the
    pre-action state is kept for undo, the quota drops by one and the move
    counts.
    """
    if tool not in TOOLS:
        raise ValueError(f'unknown tool {tool!r}; expected one of {list(TOOLS)}')
    if tool == ERASER:
        if target is None:
            raise ValueError('eraser requires a target index')
        session.board.check_index(target)
    if session.finished:
        return failure(SESSION_FINISHED, tool=tool)
    if session.tool_quotas[tool] <= 0:
        return failure(TOOL_EXHAUSTED, tool=tool)

    if tool == ADD_NUMBERS:
        return _add_numbers(session)
    if tool == SHUFFLE:
        return _shuffle(session)
    return _erase(session, target)


def _commit(session: GameSession, tool: str, cells=(), added=()) -> Outcome:
    session.tool_quotas[tool] -= 1
    session.move_count += 1
    session.selection.clear()
    log.debug('%s used; quota left %d', tool, session.tool_quotas[tool])
    events = (Event(SESSION_CHANGED),) + evaluate_lifecycle(session)
    return Outcome(kind=TOOL_USED, tool=tool, cells=tuple(cells), added=tuple(added), events=events)


def _add_numbers(session: GameSession) -> Outcome:
    board = session.board
    count = supply_size(session.mode, board)
    if board.rows_after_append(count) > session.config.max_rows:
        return failure(GRID_OVERFLOW, tool=ADD_NUMBERS)
    session.take_snapshot()
    values, cursor = draw_supply(session.mode, board, session.supply_cursor, session.rng)
    start = len(board)
    session.board = board.appended(values)
    session.supply_cursor = cursor
    return _commit(session, ADD_NUMBERS, cells=range(start, start + len(values)), added=values)


def _shuffle(session: GameSession) -> Outcome:
    board = session.board
    positions = list(board.non_empty_indices())
    values = [board.cells[i] for i in positions]
    session.take_snapshot()
    session.rng.shuffle(values)
    session.board = board.with_cells(dict(zip(positions, values)))
    return _commit(session, SHUFFLE, cells=positions)


def _erase(session: GameSession, target: int) -> Outcome:
    if session.board.is_empty(target):
        return failure(NOTHING_TO_ERASE, cells=(target,), tool=ERASER)
    session.take_snapshot()
    session.board = session.board.cleared(target)
    return _commit(session, ERASER, cells=(target,))


def undo(session: GameSession) -> Outcome:
    """Restores the state saved before the last action. Only one level is kept."""
    if session.finished:
        return failure(SESSION_FINISHED)
    snap = session.snapshot
    if snap is None:
        return failure(NOTHING_TO_UNDO)
    session.restore(snap)
    session.snapshot = None
    session.selection.clear()
    log.debug('undo: score=%d moves=%d', session.score, session.move_count)
    return Outcome(kind=UNDONE, events=(Event(SESSION_CHANGED),))
