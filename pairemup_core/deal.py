from __future__ import annotations

import random
from typing import List, Tuple

from .board import Board
from .config import EngineConfig

CLASSIC = 'classic'
RANDOM = 'random'
CHAOTIC = 'chaotic'
MODES = (CLASSIC, RANDOM, CHAOTIC)

# Values 1..19 (no zero); 10..19 are single two-digit cells.
POOL: Tuple[int, ...] = tuple(range(1, 20))
CHAOTIC_LOW, CHAOTIC_HIGH = 1, 9


def check_mode(mode: str) -> str:
    if mode not in MODES:
        raise ValueError(f'unknown mode {mode!r}; expected one of {list(MODES)}')
    return mode


def _pool_run(cursor: int, count: int) -> Tuple[List[int], int]:
    """Takes `count` values from the cyclic pool starting at `cursor`."""
    values = [POOL[(cursor + k) % len(POOL)] for k in range(count)]
    return values, (cursor + count) % len(POOL)


def deal_initial(mode: str, rng: random.Random, config: EngineConfig) -> Tuple[Board, int]:
    """Deals the opening board for a mode and returns it with the supply cursor."""
    check_mode(mode)
    count = config.initial_deal_count
    if mode == CHAOTIC:
        values = [rng.randint(CHAOTIC_LOW, CHAOTIC_HIGH) for _ in range(count)]
        cursor = 0
    else:
        values, cursor = _pool_run(0, count)
        if mode == RANDOM:
            rng.shuffle(values)
    return Board.from_values(values, cols=config.cols), cursor


def supply_size(mode: str, board: Board) -> int:
    """How many values an add-numbers call will append."""
    check_mode(mode)
    if mode == CHAOTIC:
        return max(1, board.non_empty_count())
    return 1


def draw_supply(mode: str, board: Board, cursor: int, rng: random.Random) -> Tuple[List[int], int]:
    """Draws the add-numbers values for a mode; returns them with the updated cursor."""
    count = supply_size(mode, board)
    if mode == CLASSIC:
        return _pool_run(cursor, count)
    if mode == RANDOM:
        return [rng.choice(POOL) for _ in range(count)], cursor
    return [rng.randint(CHAOTIC_LOW, CHAOTIC_HIGH) for _ in range(count)], cursor
