from __future__ import annotations

from typing import List, Optional, Tuple

from .board import Board, Cell

Pair = Tuple[int, int]

GAIN_DOUBLE_FIVE = 3
GAIN_EQUAL = 1
GAIN_SUM_TEN = 2


def are_connectable(board: Board, i: int, j: int) -> bool:
    """
    Decides whether two non-empty cells may interact.

    Cells connect when they are orthogonal neighbours, when the last cell of a
    row meets the first cell of the next row, or when they share a row or a
    column and every cell strictly between them is empty.
    """
    board.check_index(i)
    board.check_index(j)
    if i == j:
        return False
    if board.cells[i] is None or board.cells[j] is None:
        return False

    ri, ci = board.row_of(i), board.col_of(i)
    rj, cj = board.row_of(j), board.col_of(j)

    if ri == rj and abs(ci - cj) == 1:
        return True
    if ci == cj and abs(ri - rj) == 1:
        return True

    last = board.cols - 1
    if ci == last and cj == 0 and rj == ri + 1:
        return True
    if cj == last and ci == 0 and ri == rj + 1:
        return True

    if ri == rj:
        lo, hi = min(ci, cj), max(ci, cj)
        return all(board.cells[board.index(ri, c)] is None for c in range(lo + 1, hi))
    if ci == cj:
        lo, hi = min(ri, rj), max(ri, rj)
        return all(board.cells[board.index(r, ci)] is None for r in range(lo + 1, hi))
    return False


def values_match(a: Cell, b: Cell) -> bool:
    """Equal values or values summing to ten may be paired."""
    if a is None or b is None:
        return False
    return a == b or a + b == 10


def is_valid_pair(board: Board, i: int, j: int) -> bool:
    if not values_match(board.at(i), board.at(j)):
        return False
    return are_connectable(board, i, j)


def match_gain(a: int, b: int) -> int:
    """Score for removing a matched pair; double five outranks the equal and sum rules."""
    if a == 5 and b == 5:
        return GAIN_DOUBLE_FIVE
    if a == b:
        return GAIN_EQUAL
    if a + b == 10:
        return GAIN_SUM_TEN
    raise ValueError(f'values {a} and {b} do not form a pair')


def _iter_valid_pairs(board: Board):
    cells = board.cells
    live = [i for i, v in enumerate(cells) if v is not None]
    for n, i in enumerate(live):
        for j in live[n + 1:]:
            # cheap value check before the geometric one
            if not values_match(cells[i], cells[j]):
                continue
            if are_connectable(board, i, j):
                yield (i, j)


def count_available_moves(board: Board, cap: Optional[int] = None) -> int:
    """Counts valid pairs (i < j), stopping early once `cap` is reached."""
    count = 0
    for _ in _iter_valid_pairs(board):
        count += 1
        if cap is not None and count >= cap:
            break
    return count


def find_all_pairs(board: Board, limit: int = 2000) -> List[Pair]:
    pairs: List[Pair] = []
    for pair in _iter_valid_pairs(board):
        pairs.append(pair)
        if len(pairs) >= limit:
            break
    return pairs


def format_available(count: int, cap: int) -> str:
    """Display text for the hint counter: at the cap it reads e.g. '5+'."""
    if count >= cap:
        return f'{cap - 1}+'
    return str(count)
