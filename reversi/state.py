"""Mutable Reversi game state with history, undo and redo.

The board is a flat list of 64 :class:`~reversi.rules.Side` values indexed by
``y * 8 + x``. Every applied move is recorded as a :class:`Move` holding the
cell changes it caused, so undo and redo simply replay those changes.
Illegal requests never raise: they return the :data:`NO_MOVE` sentinel.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from . import rules
from .rules import Side

Cell = Tuple[int, int]


@dataclass(frozen=True)
class Change:
    """A single cell transition caused by a move."""

    x: int
    y: int
    old: Side
    new: Side

    @property
    def location(self) -> Cell:
        return (self.x, self.y)


@dataclass(frozen=True)
class Move:
    """One full turn.

    ``changes[0]`` is always the placement; the remaining entries are flips.
    ``ends`` holds the mover's own disks that closed each capturing line; they
    do not change colour. A move whose ``turn`` is ``Side.NONE`` means that no
    move happened.
    """

    turn: Side
    changes: Tuple[Change, ...] = ()
    ends: Tuple[Change, ...] = ()

    @property
    def is_null(self) -> bool:
        return self.turn == Side.NONE

    @property
    def placement(self) -> Optional[Change]:
        return self.changes[0] if self.changes else None

    @property
    def flips(self) -> Tuple[Change, ...]:
        return self.changes[1:]


NO_MOVE = Move(turn=Side.NONE)


class GameState:
    """Authoritative 8x8 board, turn tracking and move history."""

    def __init__(self) -> None:
        self._cells: List[Side] = []
        self._turn = rules.FIRST_TURN
        self._game_over = False
        self._history: List[Move] = []
        self._future: List[Move] = []
        self._start_cells: Tuple[Side, ...] = ()
        self._start_turn = rules.FIRST_TURN
        self.reset()

    @classmethod
    def from_board(cls, cells: Sequence[Side], turn: Side = rules.FIRST_TURN) -> GameState:
        """Build a position from 64 cells (index ``y * 8 + x``) with ``turn`` to move.

        If ``turn`` cannot move, the turn passes exactly as it would after a
        move, possibly ending the game.
        """
        if len(cells) != rules.CELL_COUNT:
            raise ValueError(f"Board must have {rules.CELL_COUNT} cells, got {len(cells)}")
        if turn == Side.NONE:
            raise ValueError("Initial turn must be BLACK or WHITE")
        game_state = cls()
        game_state._cells = [Side(cell) for cell in cells]
        game_state._turn = turn
        if not game_state._has_any_move(turn):
            game_state._turn = turn.opponent()
            game_state._advance_turn()
        game_state._start_cells = tuple(game_state._cells)
        game_state._start_turn = game_state._turn
        return game_state

    def reset(self) -> None:
        self._cells = [Side.NONE] * rules.CELL_COUNT
        for x, y, side in rules.INITIAL_DISKS:
            self._set(x, y, side)
        self._turn = rules.FIRST_TURN
        self._game_over = False
        self._history.clear()
        self._future.clear()
        self._start_cells = tuple(self._cells)
        self._start_turn = self._turn

    def clone(self) -> GameState:
        """Return an independent copy; moves are immutable and shared."""
        other = GameState.__new__(GameState)
        other._cells = list(self._cells)
        other._turn = self._turn
        other._game_over = self._game_over
        other._history = list(self._history)
        other._future = list(self._future)
        other._start_cells = self._start_cells
        other._start_turn = self._start_turn
        return other

    def starting_position(self) -> GameState:
        """Return a new state at the position this game started from, without history.

        Replaying :attr:`history` on it reproduces the current board.
        """
        other = GameState.__new__(GameState)
        other._cells = list(self._start_cells)
        other._turn = self._start_turn
        other._game_over = self._start_turn == Side.NONE
        other._history = []
        other._future = []
        other._start_cells = self._start_cells
        other._start_turn = self._start_turn
        return other

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_turn(self) -> Side:
        return self._turn

    @property
    def is_game_over(self) -> bool:
        return self._game_over

    @property
    def history(self) -> Tuple[Move, ...]:
        return tuple(self._history)

    @property
    def cells(self) -> Tuple[Side, ...]:
        return tuple(self._cells)

    def get(self, x: int, y: int) -> Side:
        """Return the cell owner; off-board coordinates read as empty."""
        if not rules.in_bounds(x, y):
            return Side.NONE
        return self._cells[y * rules.BOARD_SIZE + x]

    def count(self, side: Side) -> int:
        return self._cells.count(side)

    def winner(self) -> Side:
        """Return the side with more disks, or ``Side.NONE`` on a tie.

        Also valid before the game ends, where it reports the current leader.
        """
        difference = self.count(Side.BLACK) - self.count(Side.WHITE)
        if difference > 0:
            return Side.BLACK
        if difference < 0:
            return Side.WHITE
        return Side.NONE

    def can_make_move(self, x: int, y: int, side: Optional[Side] = None) -> bool:
        side = self._turn if side is None else side
        if self._game_over or side == Side.NONE or self.get(x, y) != Side.NONE:
            return False
        if not rules.in_bounds(x, y):
            return False
        opponent = side.opponent()
        for dx, dy in rules.DIRECTIONS:
            steps = 0
            walk_x, walk_y = x + dx, y + dy
            while self.get(walk_x, walk_y) == opponent:
                steps += 1
                walk_x += dx
                walk_y += dy
            if steps and self.get(walk_x, walk_y) == side:
                return True
        return False

    def legal_moves(self, side: Optional[Side] = None) -> List[Cell]:
        """Return every legal cell for ``side``, scanning x first, then y."""
        return [
            (x, y)
            for x in range(rules.BOARD_SIZE)
            for y in range(rules.BOARD_SIZE)
            if self.can_make_move(x, y, side)
        ]

    def can_undo(self) -> bool:
        return not self._game_over and bool(self._history)

    def can_redo(self) -> bool:
        return not self._game_over and bool(self._future)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def make_move(self, x: int, y: int) -> Move:
        """Place a disk for the side to move and flip every captured line."""
        turn = self._turn
        if self._game_over or turn == Side.NONE or not rules.in_bounds(x, y):
            return NO_MOVE
        if self.get(x, y) != Side.NONE:
            return NO_MOVE

        opponent = turn.opponent()
        flips: List[Change] = []
        ends: List[Change] = []
        for dx, dy in rules.DIRECTIONS:
            line: List[Change] = []
            walk_x, walk_y = x + dx, y + dy
            while self.get(walk_x, walk_y) == opponent:
                line.append(Change(walk_x, walk_y, opponent, turn))
                walk_x += dx
                walk_y += dy
            if line and self.get(walk_x, walk_y) == turn:
                flips.extend(line)
                ends.append(Change(walk_x, walk_y, turn, turn))

        if not flips:
            return NO_MOVE

        move = Move(
            turn=turn,
            changes=(Change(x, y, Side.NONE, turn), *flips),
            ends=tuple(ends),
        )
        self._apply(move.changes)
        self._history.append(move)
        self._future.clear()
        self._advance_turn()
        return move

    def undo(self) -> Move:
        if not self.can_undo():
            return NO_MOVE
        move = self._history.pop()
        for change in move.changes:
            self._set(change.x, change.y, change.old)
        self._turn = move.turn
        self._future.append(move)
        return move

    def redo(self) -> Move:
        if not self.can_redo():
            return NO_MOVE
        move = self._future.pop()
        self._apply(move.changes)
        self._turn = move.turn
        self._advance_turn()
        self._history.append(move)
        return move

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set(self, x: int, y: int, side: Side) -> None:
        self._cells[y * rules.BOARD_SIZE + x] = side

    def _apply(self, changes: Iterable[Change]) -> None:
        for change in changes:
            self._set(change.x, change.y, change.new)

    def _has_any_move(self, side: Side) -> bool:
        return any(
            self.can_make_move(x, y, side)
            for x in range(rules.BOARD_SIZE)
            for y in range(rules.BOARD_SIZE)
        )

    def _advance_turn(self) -> None:
        if self._turn == Side.NONE:
            return
        if self._has_any_move(self._turn.opponent()):
            self._turn = self._turn.opponent()
        elif not self._has_any_move(self._turn):
            self._turn = Side.NONE
            self._game_over = True

    def __repr__(self) -> str:
        return (
            f"GameState(turn={self._turn.name}, black={self.count(Side.BLACK)}, "
            f"white={self.count(Side.WHITE)}, moves={len(self._history)})"
        )


__all__ = [
    "Cell",
    "Change",
    "GameState",
    "Move",
    "NO_MOVE",
]
