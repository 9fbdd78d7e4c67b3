from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple

Cell = Optional[int]  # None marks an emptied slot

COLS = 9


@dataclass(frozen=True)
class Board:
    """The number grid: a flat, row-major tuple of cells with a fixed column count."""
    cells: Tuple[Cell, ...]
    cols: int = COLS

    def __post_init__(self) -> None:
        if self.cols <= 0:
            raise ValueError('cols must be positive')
        if len(self.cells) % self.cols != 0:
            raise ValueError(f'board length {len(self.cells)} is not a multiple of {self.cols}')

    @classmethod
    def from_values(cls, values: Iterable[Cell], cols: int = COLS) -> 'Board':
        """Builds a board from values, padding with empty cells to a full row."""
        cells = list(values)
        return cls(cells=tuple(cells + [None] * _pad_len(len(cells), cols)), cols=cols)

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def rows(self) -> int:
        return len(self.cells) // self.cols

    def row_of(self, i: int) -> int:
        return i // self.cols

    def col_of(self, i: int) -> int:
        return i % self.cols

    def index(self, r: int, c: int) -> int:
        """Calculates the flat index for a given row and column."""
        return r * self.cols + c

    def check_index(self, i: int) -> None:
        """Raises IndexError unless i addresses a cell of this board."""
        if isinstance(i, bool) or not isinstance(i, int):
            raise IndexError(f'cell index must be an int, got {i!r}')
        if not 0 <= i < len(self.cells):
            raise IndexError(f'cell index {i} out of range 0..{len(self.cells) - 1}')

    def at(self, i: int) -> Cell:
        self.check_index(i)
        return self.cells[i]

    def is_empty(self, i: int) -> bool:
        return self.at(i) is None

    def non_empty_indices(self) -> Iterator[int]:
        for i, v in enumerate(self.cells):
            if v is not None:
                yield i

    def non_empty_count(self) -> int:
        return sum(1 for v in self.cells if v is not None)

    def with_cells(self, updates: Mapping[int, Cell]) -> 'Board':
        """Returns a copy with the given positions overwritten."""
        cells = list(self.cells)
        for i, v in updates.items():
            self.check_index(i)
            cells[i] = v
        return Board(cells=tuple(cells), cols=self.cols)

    def cleared(self, *indices: int) -> 'Board':
        return self.with_cells({i: None for i in indices})

    def appended(self, values: Iterable[int]) -> 'Board':
        """Appends values after the current (padded) end and pads again."""
        return Board.from_values(list(self.cells) + list(values), cols=self.cols)

    def rows_after_append(self, count: int) -> int:
        total = len(self.cells) + count
        return -(-total // self.cols)

    def pretty(self, selected: Optional[Iterable[int]] = None) -> str:
        """Generates a human-readable grid; selected cells are bracketed."""
        sel = set(selected or ())
        width = max([len(str(v)) for v in self.cells if v is not None] or [1])
        lines: List[str] = []
        for r in range(self.rows):
            row: List[str] = []
            for c in range(self.cols):
                i = self.index(r, c)
                v = self.cells[i]
                text = '.' if v is None else str(v)
                text = text.rjust(width)
                row.append(f'[{text}]' if i in sel else f' {text} ')
            lines.append(f'{r * self.cols:>4} ' + ''.join(row))
        return '\n'.join(lines)


def _pad_len(length: int, cols: int) -> int:
    return (-length) % cols
