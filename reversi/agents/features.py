"""Symmetry-reduced feature extraction for candidate moves.

A candidate cell is described by eight feature vectors, one per walk
direction. The cell and the direction are folded into the lower-left
octant of the board, so the eight symmetric versions of a situation share
one table entry:

    mirror x if x >= 4, mirror y if y >= 4, then swap x and y if x < y

The folded cell maps onto ten generalized places::

    y=3:       9
    y=2:     7 8
    y=1:   4 5 6
    y=0: 0 1 2 3
      x: 0 1 2 3

and the folded direction onto eight codes::

    dy=+1: 3 2 1
    dy= 0: 4   0
    dy=-1: 5 6 7
       dx: - 0 +
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, List, Optional, Tuple

from .. import rules
from ..exceptions import FeatureRangeError
from ..rules import Side

if TYPE_CHECKING:
    from ..state import GameState

PLACE_COUNT = 10
DIRECTION_COUNT = 8
NEIGHBOR_COUNT_RANGE = 8
AFFECTED_DISKS_RANGE = 7
COLOR_CHANGE_RANGE = 7
ISLANDS_RANGE = 5

# Mixed-radix digits of a feature vector, most significant first.
FEATURE_RADICES: Tuple[int, ...] = (
    PLACE_COUNT,
    DIRECTION_COUNT,
    NEIGHBOR_COUNT_RANGE,
    AFFECTED_DISKS_RANGE,
    COLOR_CHANGE_RANGE,
    ISLANDS_RANGE,
)

# Canonical direction code -> (dx, dy) in the folded frame.
CANONICAL_DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
)

_HALF = rules.BOARD_SIZE // 2
_LAST = rules.BOARD_SIZE - 1
_ROW_OFFSETS = (0, 3, 5, 6)


@dataclass(frozen=True)
class Features:
    """Feature vector of one candidate move in one direction.

    The last two entries are "weak" features that generalization averages over.
    """

    generalized_place: int
    direction: int
    neighbor_count: int
    affected_disks_count: int
    neighbor_color_change_count: int
    islands_count: int

    def as_tuple(self) -> Tuple[int, ...]:
        return (
            self.generalized_place,
            self.direction,
            self.neighbor_count,
            self.affected_disks_count,
            self.neighbor_color_change_count,
            self.islands_count,
        )

    def validate(self) -> None:
        """Raise :class:`FeatureRangeError` if any value exceeds its radix."""
        for field, value, limit in zip(fields(self), self.as_tuple(), FEATURE_RADICES):
            if not 0 <= value < limit:
                raise FeatureRangeError(field.name, value, limit)


def _fold(x: int, y: int) -> Tuple[bool, bool, bool]:
    """Return (mirror_x, mirror_y, swap) for the octant fold of a cell."""
    mirror_x = x >= _HALF
    mirror_y = y >= _HALF
    folded_x = _LAST - x if mirror_x else x
    folded_y = _LAST - y if mirror_y else y
    return mirror_x, mirror_y, folded_x < folded_y


def generalized_place(x: int, y: int) -> int:
    """Fold a board cell into one of the ten generalized places."""
    if not rules.in_bounds(x, y):
        raise ValueError(f"Cell ({x}, {y}) is off the board")
    if x >= _HALF:
        x = _LAST - x
    if y >= _HALF:
        y = _LAST - y
    if x < y:
        x, y = y, x
    return x + _ROW_OFFSETS[y]


def generalized_direction(x: int, y: int, dx: int, dy: int) -> int:
    """Fold direction ``(dx, dy)`` taken from cell ``(x, y)`` into a code in [0, 7]."""
    if (dx, dy) == (0, 0) or not (-1 <= dx <= 1 and -1 <= dy <= 1):
        raise ValueError(f"Invalid direction ({dx}, {dy})")
    mirror_x, mirror_y, swap = _fold(x, y)
    if mirror_x:
        dx = -dx
    if mirror_y:
        dy = -dy
    if swap:
        dx, dy = dy, dx
    return CANONICAL_DIRECTIONS.index((dx, dy))


def true_direction(x: int, y: int, code: int) -> Tuple[int, int]:
    """Inverse of :func:`generalized_direction` for the cell ``(x, y)``."""
    if not 0 <= code < DIRECTION_COUNT:
        raise FeatureRangeError("direction", code, DIRECTION_COUNT)
    mirror_x, mirror_y, swap = _fold(x, y)
    dx, dy = CANONICAL_DIRECTIONS[code]
    if swap:
        dx, dy = dy, dx
    if mirror_x:
        dx = -dx
    if mirror_y:
        dy = -dy
    return dx, dy


def _walk(game_state: GameState, x: int, y: int, dx: int, dy: int, side: Side) -> Tuple[int, int, int, int]:
    neighbor_count = 0
    affected = 0
    color_changes = 0
    islands = 0
    passed_empty = False
    passed_own = False
    last = Side.NONE

    walk_x, walk_y = x + dx, y + dy
    while rules.in_bounds(walk_x, walk_y):
        current = game_state.get(walk_x, walk_y)
        if not passed_empty:
            if current != Side.NONE:
                neighbor_count += 1
            if not passed_own:
                if current == Side.NONE:
                    affected = 0
                elif current != side:
                    affected += 1
            if current != Side.NONE and last != Side.NONE and current != last:
                color_changes += 1
        if current != Side.NONE and last == Side.NONE:
            islands += 1

        if current == Side.NONE:
            passed_empty = True
        elif current == side:
            passed_own = True
        last = current
        walk_x += dx
        walk_y += dy

    if not passed_own:
        affected = 0
    return neighbor_count, affected, color_changes, islands


def extract_features(
    game_state: GameState,
    x: int,
    y: int,
    side: Optional[Side] = None,
) -> List[Features]:
    """
    Describe a candidate move at ``(x, y)`` by one feature vector per direction.

    Args:
        game_state: Position before the move
        x: Column of the candidate cell
        y: Row of the candidate cell
        side: Side that would move; defaults to the side to move

    Returns:
        Eight :class:`Features`, ordered like :data:`reversi.rules.DIRECTIONS`
    """
    side = game_state.current_turn if side is None else side
    place = generalized_place(x, y)
    result = []
    for dx, dy in rules.DIRECTIONS:
        neighbor_count, affected, color_changes, islands = _walk(game_state, x, y, dx, dy, side)
        result.append(
            Features(
                generalized_place=place,
                direction=generalized_direction(x, y, dx, dy),
                neighbor_count=neighbor_count,
                affected_disks_count=affected,
                neighbor_color_change_count=color_changes,
                islands_count=islands,
            )
        )
    return result


__all__ = [
    "AFFECTED_DISKS_RANGE",
    "CANONICAL_DIRECTIONS",
    "COLOR_CHANGE_RANGE",
    "DIRECTION_COUNT",
    "FEATURE_RADICES",
    "Features",
    "ISLANDS_RANGE",
    "NEIGHBOR_COUNT_RANGE",
    "PLACE_COUNT",
    "extract_features",
    "generalized_direction",
    "generalized_place",
    "true_direction",
]
