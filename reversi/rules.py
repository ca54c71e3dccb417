"""Board constants and side metadata for the Reversi engine."""

from __future__ import annotations

from enum import IntEnum

BOARD_SIZE = 8
CELL_COUNT = BOARD_SIZE * BOARD_SIZE


class Side(IntEnum):
    """Owner of a cell, or the side to move.

    ``NONE`` marks an empty cell and also "nobody to move" once the game is over.
    """

    NONE = 0
    BLACK = 1
    WHITE = 2

    def opponent(self) -> Side:
        if self == Side.BLACK:
            return Side.WHITE
        if self == Side.WHITE:
            return Side.BLACK
        return Side.NONE


# Walk directions as (dx, dy); dx varies slowest.
DIRECTIONS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)
)

INITIAL_DISKS: tuple[tuple[int, int, Side], ...] = (
    (3, 3, Side.BLACK),
    (4, 4, Side.BLACK),
    (4, 3, Side.WHITE),
    (3, 4, Side.WHITE),
)

FIRST_TURN = Side.BLACK

if len(DIRECTIONS) != 8:
    raise ValueError("Direction table must contain exactly 8 entries")


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


def direction_index(dx: int, dy: int) -> int:
    """Return the position of ``(dx, dy)`` in :data:`DIRECTIONS`."""
    return DIRECTIONS.index((dx, dy))


def sign(value: int) -> int:
    return (value > 0) - (value < 0)


__all__ = [
    "BOARD_SIZE",
    "CELL_COUNT",
    "DIRECTIONS",
    "FIRST_TURN",
    "INITIAL_DISKS",
    "Side",
    "direction_index",
    "in_bounds",
    "sign",
]
