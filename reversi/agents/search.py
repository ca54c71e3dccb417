"""Fixed-depth minimax search with alpha-beta pruning.

Positions are scored from the perspective of the side that made the root
move. Leaves use the disk ratio heuristic :func:`terminal_score`, so every
score lies in [0, 1] and the open interval (MIN_SCORE, MAX_SCORE) acts as
the initial alpha-beta window.

All exploration happens on clones; the caller's state is never mutated.
Ties at the root keep the first cell scanned (x first, then y).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..exceptions import SearchStateError
from ..rules import Side
from .base import Agent

if TYPE_CHECKING:
    from ..state import Cell, GameState

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

MIN_SCORE = -100.0
MAX_SCORE = 100.0

DEFAULT_DEPTH = 3


# =============================================================================
# Evaluation
# =============================================================================

def terminal_score(game_state: GameState, side: Side) -> float:
    """Return the share of occupied cells owned by ``side``.

    Args:
        game_state: Position to evaluate
        side: Perspective of the evaluation

    Returns:
        ``own / (own + opponent)`` in [0, 1]; empty cells are ignored
    """
    own = game_state.count(side)
    other = game_state.count(side.opponent())
    if own + other == 0:
        raise SearchStateError("Cannot score a position without disks")
    return own / (own + other)


def score_position(
    game_state: GameState,
    side: Side,
    depth: int,
    alpha: float = MIN_SCORE,
    beta: float = MAX_SCORE,
) -> float:
    """Minimax value of ``game_state`` for ``side`` searched ``depth`` plies deep.

    Nodes where ``side`` is to move maximize; all other nodes minimize. A
    node without legal moves (including game over) is scored as a leaf.

    Args:
        game_state: Position to search (not mutated)
        side: Perspective of the evaluation
        depth: Remaining plies
        alpha: Best score the maximizer can already force
        beta: Best score the minimizer can already force

    Returns:
        Score in [0, 1]
    """
    if depth <= 0:
        return terminal_score(game_state, side)

    maximizing = game_state.current_turn == side
    best = MIN_SCORE if maximizing else MAX_SCORE
    explored = 0
    for x, y in game_state.legal_moves():
        child = game_state.clone()
        child.make_move(x, y)
        value = score_position(child, side, depth - 1, alpha, beta)
        explored += 1
        if maximizing:
            if value > best:
                best = value
                if best >= beta:
                    return best
                alpha = max(alpha, best)
        elif value < best:
            best = value
            if best <= alpha:
                return best
            beta = min(beta, best)

    if explored == 0:
        return terminal_score(game_state, side)
    return best


# =============================================================================
# Agent
# =============================================================================

class SearchAgent(Agent):
    """Deterministic alpha-beta agent with a fixed search depth."""

    def __init__(self, depth: int = DEFAULT_DEPTH) -> None:
        self._depth = 0
        self.depth = depth

    @property
    def depth(self) -> int:
        return self._depth

    @depth.setter
    def depth(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"Search depth must be non-negative, got {value}")
        self._depth = value

    def decide(self, game_state: GameState) -> Optional[Cell]:
        mover = game_state.current_turn
        if mover == Side.NONE or game_state.is_game_over:
            return None

        best_cell: Optional[Cell] = None
        best_score = MIN_SCORE
        for x, y in game_state.legal_moves():
            child = game_state.clone()
            child.make_move(x, y)
            value = score_position(child, mover, self._depth, best_score, MAX_SCORE)
            if value > best_score:
                best_cell = (x, y)
                best_score = value

        logger.debug("%s chose %s with score %.4f at depth %d", self.name, best_cell, best_score, self._depth)
        return best_cell

    @property
    def name(self) -> str:
        return f"SearchAgent(depth={self._depth})"


__all__ = [
    "DEFAULT_DEPTH",
    "MAX_SCORE",
    "MIN_SCORE",
    "SearchAgent",
    "score_position",
    "terminal_score",
]
