from __future__ import annotations

import random
from typing import Any, Callable, Dict, List, Mapping, Optional

from .board import Board, Cell
from .config import EngineConfig, TOOLS
from .deal import check_mode
from .state import GameSession, RESULTS, Snapshot

FORMAT_VERSION = 1

SessionSnapshot = Dict[str, Any]


def board_to_json(b: Board) -> Dict[str, Any]:
    return {'cols': int(b.cols), 'cells': list(b.cells)}


def _cell_from_json(v: Any) -> Cell:
    if v is None:
        return None
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValueError(f'bad cell value: {v!r}')
    return v


def board_from_json(obj: Mapping[str, Any]) -> Board:
    cells = tuple(_cell_from_json(v) for v in obj['cells'])
    return Board(cells=cells, cols=int(obj['cols']))


def _quotas_from_json(obj: Mapping[str, Any]) -> Dict[str, int]:
    if set(obj) != set(TOOLS):
        raise ValueError(f'toolQuotas must have exactly the keys {list(TOOLS)}')
    return {k: int(obj[k]) for k in TOOLS}


def _snapshot_to_json(s: Snapshot) -> Dict[str, Any]:
    return {
        'board': board_to_json(s.board),
        'score': s.score,
        'moveCount': s.move_count,
        'toolQuotas': dict(s.tool_quotas),
        'supplyCursor': s.supply_cursor,
    }


def _snapshot_from_json(obj: Mapping[str, Any]) -> Snapshot:
    return Snapshot(
        board=board_from_json(obj['board']),
        score=int(obj['score']),
        move_count=int(obj['moveCount']),
        tool_quotas=_quotas_from_json(obj['toolQuotas']),
        supply_cursor=int(obj['supplyCursor']),
    )


def serialize(session: GameSession) -> SessionSnapshot:
    """Turns a session into a JSON-safe dict for a persistence collaborator."""
    return {
        'version': FORMAT_VERSION,
        'mode': session.mode,
        'config': session.config.to_dict(),
        'board': board_to_json(session.board),
        'score': session.score,
        'moveCount': session.move_count,
        'toolQuotas': dict(session.tool_quotas),
        'supplyCursor': session.supply_cursor,
        'selection': list(session.selection),
        'snapshot': _snapshot_to_json(session.snapshot) if session.snapshot is not None else None,
        'finished': bool(session.finished),
        'result': session.result,
        'endReason': session.end_reason,
    }


def deserialize(
    data: Mapping[str, Any],
    rng: Optional[random.Random] = None,
    elapsed_source: Optional[Callable[[], int]] = None,
) -> GameSession:
    """Rebuilds a session from `serialize` output. Malformed payloads raise ValueError."""
    if not isinstance(data, Mapping):
        raise ValueError(f'bad session payload: expected a mapping, got {type(data).__name__}')
    try:
        version = int(data.get('version', FORMAT_VERSION))
        if version != FORMAT_VERSION:
            raise ValueError(f'unsupported session format version {version}')
        config = EngineConfig.from_dict(data.get('config') or {})
        board = board_from_json(data['board'])
        if board.cols != config.cols:
            raise ValueError('board cols do not match config')
        selection: List[int] = [int(i) for i in data.get('selection', [])]
        for i in selection:
            board.check_index(i)
        if len(selection) > 2:
            raise ValueError('selection holds more than two cells')
        result = data.get('result')
        finished = bool(data.get('finished', False))
        if result is not None and result not in RESULTS:
            raise ValueError(f'bad result {result!r}')
        if finished and result is None:
            raise ValueError('finished session without a result')
        snap = data.get('snapshot')
        score = int(data['score'])
        if score < 0:
            raise ValueError('score must be non-negative')
        return GameSession(
            mode=check_mode(str(data['mode'])),
            board=board,
            config=config,
            score=score,
            move_count=int(data['moveCount']),
            tool_quotas=_quotas_from_json(data['toolQuotas']),
            supply_cursor=int(data['supplyCursor']),
            selection=selection,
            snapshot=_snapshot_from_json(snap) if snap is not None else None,
            finished=finished,
            result=result,
            end_reason=data.get('endReason'),
            rng=rng if rng is not None else random.Random(),
            elapsed_source=elapsed_source,
        )
    except (AttributeError, KeyError, TypeError, IndexError) as e:
        raise ValueError(f'bad session payload: {e}') from e
