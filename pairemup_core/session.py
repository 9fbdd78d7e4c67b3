from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from .config import EngineConfig
from .deal import check_mode, deal_initial
from .lifecycle import evaluate_lifecycle
from .moves import Pair, count_available_moves, find_all_pairs, format_available, is_valid_pair, match_gain
from .outcomes import (
    DESELECTED,
    INVALID_PAIR,
    MATCHED,
    SELECTED,
    SELECTION_CLEARED,
    SESSION_CHANGED,
    SESSION_FINISHED,
    Event,
    Outcome,
    failure,
)
from .state import GameSession

log = logging.getLogger(__name__)


def new_session(
    mode: str,
    config: Optional[EngineConfig] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    elapsed_source: Optional[Callable[[], int]] = None,
) -> GameSession:
    """Creates a freshly dealt session for a mode. Pass `rng` or `seed` for reproducible deals."""
    check_mode(mode)
    cfg = config or EngineConfig()
    rand = rng if rng is not None else random.Random(seed)
    board, cursor = deal_initial(mode, rand, cfg)
    log.debug('new %s session: %d cells, cursor=%d', mode, len(board), cursor)
    return GameSession(
        mode=mode,
        board=board,
        config=cfg,
        tool_quotas=dict(cfg.tool_quotas),
        supply_cursor=cursor,
        rng=rand,
        elapsed_source=elapsed_source,
    )


def select_cell(session: GameSession, index: int) -> Outcome:
    """
    Applies a click on a cell.

    An empty cell clears the selection, a selected cell is deselected, and the
    second non-empty cell triggers a match attempt.
    """
    session.board.check_index(index)
    if session.finished:
        return failure(SESSION_FINISHED, cells=(index,))
    sel = session.selection
    if session.board.is_empty(index):
        sel.clear()
        return Outcome(kind=SELECTION_CLEARED)
    if index in sel:
        sel.remove(index)
        return Outcome(kind=DESELECTED, cells=(index,))
    if len(sel) != 1:
        sel[:] = [index]
        return Outcome(kind=SELECTED, cells=(index,))
    first = sel[0]
    sel.append(index)
    return attempt_match(session, first, index)


def attempt_match(session: GameSession, i: int, j: int) -> Outcome:
    board = session.board
    board.check_index(i)
    board.check_index(j)
    if session.finished:
        return failure(SESSION_FINISHED, cells=(i, j))
    if not is_valid_pair(board, i, j):
        session.selection.clear()
        return failure(INVALID_PAIR, cells=(i, j))

    session.take_snapshot()
    gained = match_gain(board.cells[i], board.cells[j])
    session.score += gained
    session.board = board.cleared(i, j)
    session.move_count += 1
    session.selection.clear()
    log.debug('matched %d,%d (+%d) score=%d', i, j, gained, session.score)

    events = (Event(SESSION_CHANGED),) + evaluate_lifecycle(session)
    return Outcome(kind=MATCHED, cells=(i, j), gained=gained, events=events)


@dataclass(frozen=True)
class Hint:
    available: int
    text: str
    pair: Optional[Pair]


def hint(session: GameSession) -> Hint:
    """Reports available moves without touching quotas, the move count or the snapshot."""
    cap = session.config.hint_display_cap
    available = count_available_moves(session.board, cap=cap)
    pairs = find_all_pairs(session.board, limit=1)
    return Hint(available=available, text=format_available(available, cap), pair=pairs[0] if pairs else None)
