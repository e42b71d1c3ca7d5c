"""Winning lines of the 3x3x3 cube and the two win predicates built on them."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

Line = Tuple[int, int, int]

SIZE = 3
LAYER_CELLS = SIZE * SIZE
BOARD_CELLS = LAYER_CELLS * SIZE
EMPTY = " "


def layer_of(index: int) -> int:
    return index // LAYER_CELLS


def _build_layer_lines(z: int) -> Tuple[Line, ...]:
    offset = z * LAYER_CELLS
    lines = []
    # Rows
    for y in range(SIZE):
        lines.append((offset + y * 3 + 0, offset + y * 3 + 1, offset + y * 3 + 2))
    # Columns
    for x in range(SIZE):
        lines.append((offset + x + 0, offset + x + 3, offset + x + 6))
    # Diagonals
    lines.append((offset + 0, offset + 4, offset + 8))
    lines.append((offset + 2, offset + 4, offset + 6))
    return tuple(lines)


def _build_cross_layer_lines() -> Tuple[Line, ...]:
    lines = []

    # Verticals: same (x, y) on every layer
    for x in range(SIZE):
        for y in range(SIZE):
            lines.append((y * 3 + x, 9 + y * 3 + x, 18 + y * 3 + x))

    # Diagonals on XZ planes (constant y)
    for y in range(SIZE):
        lines.append((y * 3 + 0, 9 + y * 3 + 1, 18 + y * 3 + 2))
        lines.append((y * 3 + 2, 9 + y * 3 + 1, 18 + y * 3 + 0))

    # Diagonals on YZ planes (constant x)
    for x in range(SIZE):
        lines.append((0 * 3 + x, 9 + 1 * 3 + x, 18 + 2 * 3 + x))
        lines.append((2 * 3 + x, 9 + 1 * 3 + x, 18 + 0 * 3 + x))

    # Space diagonals through the cube center
    lines.extend([(0, 13, 26), (2, 13, 24), (6, 13, 20), (8, 13, 18)])
    return tuple(lines)


LAYER_LINES: Tuple[Tuple[Line, ...], ...] = tuple(
    _build_layer_lines(z) for z in range(SIZE)
)
CROSS_LAYER_LINES: Tuple[Line, ...] = _build_cross_layer_lines()


def layer_lines(z: int) -> Tuple[Line, ...]:
    """The 8 in-layer lines of layer ``z``: rows, columns, then diagonals."""
    return LAYER_LINES[z]


def cross_layer_lines() -> Tuple[Line, ...]:
    """The 19 lines that pass through all three layers."""
    return CROSS_LAYER_LINES


def _first_complete(
    board: Sequence[str], lines: Sequence[Line]
) -> Tuple[Optional[str], Optional[Line]]:
    for line in lines:
        a, b, c = line
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return v, line
    return None, None


def check_cross_layer_winner(
    board: Sequence[str],
) -> Tuple[Optional[str], Optional[Line]]:
    return _first_complete(board, CROSS_LAYER_LINES)


def check_layer_winner(
    board: Sequence[str], z: int
) -> Tuple[Optional[str], Optional[Line]]:
    return _first_complete(board, LAYER_LINES[z])
