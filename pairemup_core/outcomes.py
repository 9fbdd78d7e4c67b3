from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

# success kinds
SELECTED = 'Selected'
DESELECTED = 'Deselected'
SELECTION_CLEARED = 'SelectionCleared'
MATCHED = 'Matched'
TOOL_USED = 'ToolUsed'
UNDONE = 'Undone'

# expected rule violations
INVALID_PAIR = 'InvalidPair'
TOOL_EXHAUSTED = 'ToolExhausted'
GRID_OVERFLOW = 'GridOverflow'
NOTHING_TO_UNDO = 'NothingToUndo'
SESSION_FINISHED = 'SessionFinished'
NOTHING_TO_ERASE = 'NothingToErase'

FAILURES = frozenset({
    INVALID_PAIR,
    TOOL_EXHAUSTED,
    GRID_OVERFLOW,
    NOTHING_TO_UNDO,
    SESSION_FINISHED,
    NOTHING_TO_ERASE,
})

SESSION_CHANGED = 'session_changed'
GAME_ENDED = 'game_ended'


@dataclass(frozen=True)
class Event:
    name: str
    payload: Any = None


@dataclass(frozen=True)
class Outcome:
    """Result of an engine entry point: a kind plus whatever the action produced."""
    kind: str
    cells: Tuple[int, ...] = ()
    gained: int = 0
    added: Tuple[int, ...] = ()
    tool: Optional[str] = None
    events: Tuple[Event, ...] = ()

    @property
    def ok(self) -> bool:
        return self.kind not in FAILURES

    @property
    def ended(self) -> bool:
        return any(e.name == GAME_ENDED for e in self.events)

    def event(self, name: str) -> Optional[Event]:
        for e in self.events:
            if e.name == name:
                return e
        return None


def failure(kind: str, cells: Tuple[int, ...] = (), tool: Optional[str] = None) -> Outcome:
    if kind not in FAILURES:
        raise ValueError(f'{kind} is not a failure kind')
    return Outcome(kind=kind, cells=cells, tool=tool)
