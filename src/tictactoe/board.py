"""Immutable 3x3 board, its text fixture format and console rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Tuple

Position = Tuple[int, int]  # (row, col), rows A-C and columns 1-3

SIZE = 3
ROW_LABELS: Tuple[str, ...] = ("A", "B", "C")
COLUMN_LABELS: Tuple[str, ...] = ("1", "2", "3")

WINNING_LINES: Tuple[Tuple[Position, Position, Position], ...] = (
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)


class BoardParseError(ValueError):
    """Raised when a textual board is malformed."""


class Cell(Enum):
    X = "X"
    O = "O"
    EMPTY = "-"


Squares = Tuple[Tuple[Cell, ...], ...]


def _empty_squares() -> Squares:
    return tuple(tuple(Cell.EMPTY for _ in range(SIZE)) for _ in range(SIZE))


@dataclass(frozen=True)
class Board:
    # Rows top to bottom; each row holds columns left to right.
    squares: Squares = field(default_factory=_empty_squares)

    def __post_init__(self) -> None:
        squares = tuple(tuple(row) for row in self.squares)
        if len(squares) != SIZE or any(len(row) != SIZE for row in squares):
            raise ValueError("Board must be exactly 3x3")
        if not all(isinstance(cell, Cell) for row in squares for cell in row):
            raise ValueError("Board cells must be Cell values")
        # Stored as fresh tuples, independent of the rows passed in.
        object.__setattr__(self, "squares", squares)

    def __getitem__(self, pos: Position) -> Cell:
        row, col = _checked(pos)
        return self.squares[row][col]

    def place(self, pos: Position, cell: Cell) -> "Board":
        """Return a copy of this board with ``cell`` written at ``pos``."""
        row, col = _checked(pos)
        rows = [list(r) for r in self.squares]
        rows[row][col] = cell
        return Board(tuple(tuple(r) for r in rows))

    def cells_for(self, cell: Cell) -> List[Position]:
        """Positions holding ``cell``, in row-major order."""
        return [
            (row, col)
            for row in range(SIZE)
            for col in range(SIZE)
            if self.squares[row][col] is cell
        ]

    def empty_cells(self) -> List[Position]:
        return self.cells_for(Cell.EMPTY)

    def is_full(self) -> bool:
        return not self.empty_cells()

    # ---- text fixture format ----

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """
        Parse three newline-separated lines of three characters each,
        using 'X', 'O' and '-' for an empty cell.
        """
        lines = text.split("\n")
        if len(lines) != SIZE:
            raise BoardParseError(f"Expected {SIZE} lines, got {len(lines)}")
        rows: List[Tuple[Cell, ...]] = []
        for index, line in enumerate(lines):
            if len(line) != SIZE:
                raise BoardParseError(
                    f"Line {index + 1} must have {SIZE} characters: {line!r}"
                )
            try:
                rows.append(tuple(Cell(char) for char in line))
            except ValueError as exc:
                raise BoardParseError(
                    f"Line {index + 1} has an unknown cell in {line!r}"
                ) from exc
        return cls(tuple(rows))

    def to_string(self) -> str:
        return "\n".join(
            "".join(cell.value for cell in row) for row in self.squares
        )

    def __str__(self) -> str:
        return self.to_string()


def _checked(pos: Position) -> Position:
    row, col = pos
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise ValueError(f"Position {pos} is outside the board")
    return row, col


DEFAULT_GLYPHS: Mapping[Cell, str] = {Cell.X: "X", Cell.O: "O", Cell.EMPTY: "."}


def position_label(pos: Position) -> str:
    """Human label for a position, e.g. (2, 1) -> 'C2'."""
    row, col = _checked(pos)
    return f"{ROW_LABELS[row]}{COLUMN_LABELS[col]}"


def render_board(board: Board, glyphs: Optional[Mapping[Cell, str]] = None) -> str:
    glyphs = DEFAULT_GLYPHS if glyphs is None else glyphs
    lines = [
        f"{label} {' '.join(glyphs[cell] for cell in row)}"
        for label, row in zip(ROW_LABELS, board.squares)
    ]
    lines.append(f"  {' '.join(COLUMN_LABELS)}")
    return "\n".join(lines)
