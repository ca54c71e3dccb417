"""Post-game credit assignment for the evolving agent.

A finished game is replayed from the position it started from. Every
cell a move touches (its placement and the disks it flips) carries an
*impact* attributed to that move and to the capturing line, i.e. the
direction, responsible for it. Impacts then spread backwards as the game
goes on:

* when a disk carrying impacts is flipped again, those impacts decay by
  :data:`IMPACT_DECAY` and now describe the new colour of the cell; the
  moves that owned them are also credited, at the same decayed factor, with
  the placement of the flipping move;
* when a capturing line is closed by a disk carrying impacts, the owners of
  those impacts are credited with the whole line, again decayed.

At the end, a (move, direction) pair is worth the sum of its impacts on
cells that finished in the winner's colour. Normalized per side and scaled
by the side's overall result, that sum becomes the learning feedback of
the matching feature vector.

Impact records live in an arena (:class:`ImpactLedger`) and are addressed
by index from two views, by owner and by location, so an update through
one view is seen by the other.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Tuple

from .. import rules
from ..exceptions import HistoryMismatchError
from ..formatting import format_board
from ..rules import Side
from ..state import GameState
from .features import Features, extract_features

if TYPE_CHECKING:
    from ..state import Cell, Change, Move

logger = logging.getLogger(__name__)

IMPACT_DECAY = 0.125
WIN_BASE_FEEDBACK = 0.25
MIN_RAW_IMPACT = 1e-6

# (index of the move in the history, index of the direction in rules.DIRECTIONS)
ImpactKey = Tuple[int, int]


@dataclass
class Impact:
    """Latest change seen at a cell and the credit factor left for its owner."""

    change: Change
    factor: float


class ImpactLedger:
    """Arena of impact records indexed by owner and by location."""

    def __init__(self) -> None:
        self.records: List[Impact] = []
        self._by_key: Dict[ImpactKey, Dict[Cell, int]] = defaultdict(dict)
        self._by_location: Dict[Cell, Dict[ImpactKey, int]] = defaultdict(dict)

    def record(self, key: ImpactKey, change: Change, factor: float = 1.0) -> int:
        """Store an impact for ``key`` at the change's cell, replacing any older one."""
        index = len(self.records)
        self.records.append(Impact(change, factor))
        self._by_key[key][change.location] = index
        self._by_location[change.location][key] = index
        return index

    def propagate(self, key: ImpactKey, change: Change, factor: float) -> None:
        """Store an indirect impact unless ``key`` already holds a stronger one there."""
        existing = self._by_key.get(key, {}).get(change.location)
        if existing is not None and self.records[existing].factor > factor:
            return
        self.record(key, change, factor)

    def at(self, location: Cell) -> List[Tuple[ImpactKey, int]]:
        """Snapshot of ``(owner, record index)`` pairs at a cell."""
        return list(self._by_location.get(location, {}).items())

    def keys(self) -> List[ImpactKey]:
        return list(self._by_key)

    def impacts_of(self, key: ImpactKey) -> List[Impact]:
        return [self.records[index] for index in self._by_key.get(key, {}).values()]


@dataclass(frozen=True)
class MoveCredit:
    """Features of one recorded move and the feedback for each of them."""

    move_number: int
    move: Move
    features: Tuple[Features, ...]
    feedback: Tuple[float, ...]


@dataclass(frozen=True)
class CreditReport:
    black_feedback: float
    white_feedback: float
    moves: Tuple[MoveCredit, ...]


def outcome_feedback(game_state: GameState) -> Tuple[float, float]:
    """
    Overall learning feedback of each side for a finished position.

    Black's disk share mapped to [-1, 1], blended with a fixed bonus for a
    win (penalty for a loss); white receives the negation.

    Returns:
        ``(black_feedback, white_feedback)``, each in [-1, 1]
    """
    black = game_state.count(Side.BLACK)
    white = game_state.count(Side.WHITE)
    if black + white == 0:
        raise HistoryMismatchError(len(game_state.history), "finished board holds no disks")
    black_feedback = (black / (black + white)) * 2 - 1
    if black > white:
        bonus = WIN_BASE_FEEDBACK
    elif black < white:
        bonus = -WIN_BASE_FEEDBACK
    else:
        bonus = 0.0
    black_feedback = black_feedback * (1 - WIN_BASE_FEEDBACK) + bonus
    return black_feedback, -black_feedback


def _direction_of(origin: Change, target: Change) -> int:
    return rules.direction_index(rules.sign(target.x - origin.x), rules.sign(target.y - origin.y))


def _capturing_lines(number: int, move: Move) -> Dict[int, Tuple[Change, List[Change]]]:
    """Map each capturing direction to its closing end and the changes on its line."""
    placement = move.placement
    lines: Dict[int, Tuple[Change, List[Change]]] = {}
    for change in (*move.flips, *move.ends):
        if change.location == placement.location:
            raise HistoryMismatchError(number, f"change at the placement cell {placement.location}")
    for end in move.ends:
        lines[_direction_of(placement, end)] = (end, [placement])
    for flip in move.flips:
        direction = _direction_of(placement, flip)
        if direction not in lines:
            raise HistoryMismatchError(number, f"flip at {flip.location} has no closing end")
        lines[direction][1].append(flip)
    return lines


def _replay(game_state: GameState, ledger: ImpactLedger) -> Dict[int, Tuple[Features, ...]]:
    replay = game_state.starting_position()
    move_features: Dict[int, Tuple[Features, ...]] = {}

    for number, move in enumerate(game_state.history):
        placement = move.placement
        turn = replay.current_turn
        if turn == Side.NONE or placement is None or turn != move.turn or placement.new != turn:
            raise HistoryMismatchError(number, f"recorded mover {move.turn.name} but {turn.name} is to move")
        lines = _capturing_lines(number, move)

        # Flipped disks: decay what they carried and credit its owners with this placement.
        for change in move.flips:
            for key, index in ledger.at(change.location):
                impact = ledger.records[index]
                impact.change = change
                impact.factor *= IMPACT_DECAY
                ledger.propagate(key, placement, impact.factor)

        # Closing ends: whoever put impact on an end shares the credit for its line.
        for end, line in lines.values():
            for key, index in ledger.at(end.location):
                factor = ledger.records[index].factor * IMPACT_DECAY
                for change in line:
                    ledger.propagate(key, change, factor)

        for direction, (_, line) in lines.items():
            for change in line:
                ledger.record((number, direction), change)

        move_features[number] = tuple(extract_features(replay, placement.x, placement.y))
        applied = replay.make_move(placement.x, placement.y)
        if applied.changes != move.changes:
            raise HistoryMismatchError(number, f"move at {placement.location} does not replay identically")

    if replay.cells != game_state.cells:
        raise HistoryMismatchError(len(game_state.history), "replayed board differs from the finished board")
    return move_features


def _raw_impacts(ledger: ImpactLedger, winner: Side) -> Dict[ImpactKey, float]:
    raw: Dict[ImpactKey, float] = {}
    for key in ledger.keys():
        best_at: Dict[Cell, float] = {}
        for impact in ledger.impacts_of(key):
            if impact.change.new != winner:
                continue
            location = impact.change.location
            best_at[location] = max(best_at.get(location, 0.0), impact.factor)
        raw[key] = sum(best_at.values())
    return raw


def assign_credit(game_state: GameState) -> CreditReport:
    """
    Replay a finished game and compute per-direction feedback for every move.

    Args:
        game_state: A finished game; only its history and final board are read

    Returns:
        A :class:`CreditReport` with one :class:`MoveCredit` per recorded move

    Raises:
        ValueError: If the game is not over
        HistoryMismatchError: If the history does not replay onto the final board
    """
    if not game_state.is_game_over:
        raise ValueError("Credit assignment needs a finished game")

    black_feedback, white_feedback = outcome_feedback(game_state)
    history = game_state.history
    ledger = ImpactLedger()
    move_features = _replay(game_state, ledger)

    raw = _raw_impacts(ledger, game_state.winner())
    max_raw = {Side.BLACK: MIN_RAW_IMPACT, Side.WHITE: MIN_RAW_IMPACT}
    for (number, _), value in raw.items():
        side = history[number].turn
        max_raw[side] = max(max_raw[side], value)

    side_feedback = {Side.BLACK: black_feedback, Side.WHITE: white_feedback}
    credits = []
    for number, move in enumerate(history):
        feedback = tuple(
            raw.get((number, direction), 0.0) / max_raw[move.turn] * side_feedback[move.turn]
            for direction in range(len(rules.DIRECTIONS))
        )
        credits.append(MoveCredit(number, move, move_features[number], feedback))

    if logger.isEnabledFor(logging.DEBUG):
        _log_credits(game_state.starting_position(), credits, black_feedback, white_feedback)
    return CreditReport(black_feedback, white_feedback, tuple(credits))


def _log_credits(
    replay: GameState,
    credits: List[MoveCredit],
    black_feedback: float,
    white_feedback: float,
) -> None:
    logger.debug("Overall feedback: black=%.4f white=%.4f", black_feedback, white_feedback)
    for credit in credits:
        placement = credit.move.placement
        before = format_board(replay, highlight=placement.location)
        replay.make_move(placement.x, placement.y)
        logger.debug(
            "Move %d by %s, feedback per direction %s:\n%s\n=>\n%s",
            credit.move_number,
            credit.move.turn.name,
            ", ".join(f"{value:+.3f}" for value in credit.feedback),
            before,
            format_board(replay),
        )


__all__ = [
    "IMPACT_DECAY",
    "MIN_RAW_IMPACT",
    "WIN_BASE_FEEDBACK",
    "CreditReport",
    "Impact",
    "ImpactKey",
    "ImpactLedger",
    "MoveCredit",
    "assign_credit",
    "outcome_feedback",
]
