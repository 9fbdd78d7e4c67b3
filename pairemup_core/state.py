from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from .board import Board
from .config import EngineConfig

RESULT_WIN = 'win'
RESULT_LOSE = 'lose'
RESULTS = (RESULT_WIN, RESULT_LOSE)

REASON_TARGET_REACHED = 'target_reached'
REASON_NO_MOVES = 'no_moves'
REASON_GRID_OVERFLOW = 'grid_overflow'


@dataclass(frozen=True)
class Snapshot:
    """The pre-mutation state kept for one-level undo."""
    board: Board
    score: int
    move_count: int
    tool_quotas: Mapping[str, int]
    supply_cursor: int


@dataclass
class GameSession:
    """Represents one game in progress or finished. Owned and passed around by the caller."""
    mode: str
    board: Board
    config: EngineConfig = field(default_factory=EngineConfig)
    score: int = 0
    move_count: int = 0
    tool_quotas: Dict[str, int] = field(default_factory=dict)
    supply_cursor: int = 0
    selection: List[int] = field(default_factory=list)
    snapshot: Optional[Snapshot] = None
    finished: bool = False
    result: Optional[str] = None
    end_reason: Optional[str] = None
    rng: random.Random = field(default_factory=random.Random, compare=False, repr=False)
    elapsed_source: Optional[Callable[[], int]] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.tool_quotas:
            self.tool_quotas = dict(self.config.tool_quotas)

    @property
    def active(self) -> bool:
        return not self.finished

    def quotas_left(self) -> int:
        return sum(self.tool_quotas.values())

    def elapsed(self) -> int:
        return int(self.elapsed_source()) if self.elapsed_source is not None else 0

    def take_snapshot(self) -> None:
        # Board is immutable, so it is shared rather than copied.
        self.snapshot = Snapshot(
            board=self.board,
            score=self.score,
            move_count=self.move_count,
            tool_quotas=dict(self.tool_quotas),
            supply_cursor=self.supply_cursor,
        )

    def restore(self, snap: Snapshot) -> None:
        self.board = snap.board
        self.score = snap.score
        self.move_count = snap.move_count
        self.tool_quotas = dict(snap.tool_quotas)
        self.supply_cursor = snap.supply_cursor


def format_elapsed(secs: int) -> str:
    secs = max(0, int(secs))
    return f'{secs // 60:02d}:{secs % 60:02d}'


@dataclass(frozen=True)
class ResultRecord:
    """One finished game, as handed to the results log."""
    mode: str
    score: int
    result: str
    elapsed_time: int
    move_count: int
    finished_at: str

    @property
    def time_text(self) -> str:
        return format_elapsed(self.elapsed_time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': self.mode,
            'score': self.score,
            'result': self.result,
            'elapsedTime': self.elapsed_time,
            'time': self.time_text,
            'moveCount': self.move_count,
            'finishedAt': self.finished_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ResultRecord':
        return cls(
            mode=str(data['mode']),
            score=int(data['score']),
            result=str(data['result']),
            elapsed_time=int(data['elapsedTime']),
            move_count=int(data['moveCount']),
            finished_at=str(data['finishedAt']),
        )
