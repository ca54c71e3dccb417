"""Self-trained evaluator ("evolving AI").

The agent keeps one byte per distinct :class:`~reversi.agents.features.Features`
vector: 0 means the situation always contributed to losses, 255 that it
always contributed to wins and 128 is the untrained default. A candidate
move scores the sum over its eight direction features; the best move wins
and ties are broken uniformly at random with a long-lived generator.

After every finished game, :func:`~reversi.agents.credit.assign_credit`
turns the game into per-feature feedback, the table moves towards it by
``learning_rate`` and the result is saved.
"""
from __future__ import annotations

import logging
import math
import random
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

import numpy as np

from ..rules import Side
from .base import Agent
from .credit import assign_credit
from .features import FEATURE_RADICES, Features, extract_features
from .storage import TableStore

if TYPE_CHECKING:
    from ..state import Cell, GameState

logger = logging.getLogger(__name__)

TABLE_SIZE = math.prod(FEATURE_RADICES)
MAX_VALUE = 255

DEFAULT_DATA_FILE = "ReversiEvolvingAI.dat"
DEFAULT_LEARNING_RATE = 0.1
DEFAULT_GENERALIZATION = 0.1

# Entries sharing every feature except the two weak ones are contiguous.
_WEAK_BLOCK = FEATURE_RADICES[-2] * FEATURE_RADICES[-1]


def _clamp_unit(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


def data_index(features: Features) -> int:
    """Mixed-radix index of a feature vector in the evaluation table."""
    features.validate()
    index = 0
    for value, radix in zip(features.as_tuple(), FEATURE_RADICES):
        index = index * radix + value
    return index


class EvolvingAgent(Agent):
    """Agent that scores moves with a persisted, self-trained feature table."""

    def __init__(
        self,
        data_path: Path | str = DEFAULT_DATA_FILE,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        generalization: float = DEFAULT_GENERALIZATION,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Args:
            data_path: Table file; created when missing
            learning_rate: In [0, 1]. 0 disables learning, 1 lets the last game
                overwrite everything learned for the features it touched
            generalization: In [0, 1]. Weight of the average of the 34 entries
                that differ only in the weak features. 1/34 makes their sum
                count as much as the specific entry
            seed: Seed for the tie-break generator when ``rng`` is not given
            rng: Generator used for tie-breaks
        """
        self.learning_rate = _clamp_unit(learning_rate)
        self.generalization = _clamp_unit(generalization)
        self._rng = rng or random.Random(seed)
        self._store = TableStore(data_path, TABLE_SIZE)
        self._table = self._store.load()

    @property
    def data_path(self) -> Path:
        return self._store.path

    @property
    def table(self) -> np.ndarray:
        """The live table. Mutating it bypasses learning; tests only."""
        return self._table

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score(self, features: Features) -> float:
        """Score of a feature vector in [0, 1], optionally blended with its weak neighbours."""
        index = data_index(features)
        base = self._table[index] / MAX_VALUE
        if self.generalization == 0:
            return float(base)

        start = index - index % _WEAK_BLOCK
        block_sum = int(self._table[start : start + _WEAK_BLOCK].sum(dtype=np.int64))
        neighbours = (block_sum - int(self._table[index])) / (_WEAK_BLOCK - 1) / MAX_VALUE
        return float((1 - self.generalization) * base + self.generalization * neighbours)

    def move_score(self, game_state: GameState, x: int, y: int) -> float:
        return sum(self.score(features) for features in extract_features(game_state, x, y))

    def decide(self, game_state: GameState) -> Optional[Cell]:
        if game_state.current_turn == Side.NONE or game_state.is_game_over:
            return None

        best_moves: List[Cell] = []
        best_score = -math.inf
        for x, y in game_state.legal_moves():
            value = self.move_score(game_state, x, y)
            if value > best_score:
                best_score = value
                best_moves = [(x, y)]
            elif value == best_score:
                best_moves.append((x, y))

        if not best_moves:
            return None
        if len(best_moves) == 1:
            return best_moves[0]
        choice = self._rng.choice(best_moves)
        logger.debug("Multiple best choices %s, chose %s", best_moves, choice)
        return choice

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------

    def learn_features(self, features: Features, feedback: float) -> None:
        """Move one entry by ``feedback * 255 * learning_rate``.

        Rounding goes away from the old value (floor for negative feedback,
        ceil otherwise), so any nonzero step changes the byte.
        """
        index = data_index(features)
        value = float(self._table[index]) + feedback * MAX_VALUE * self.learning_rate
        value = min(max(value, 0.0), float(MAX_VALUE))
        value = math.floor(value) if feedback < 0 else math.ceil(value)
        self._table[index] = int(value)

    def learn(self, game_state: GameState) -> None:
        """Train on a finished game and save the table.

        Credit assignment runs to completion before the table is touched, so a
        corrupt history leaves both the table and the file unchanged.
        """
        if not game_state.is_game_over or self.learning_rate == 0:
            return

        report = assign_credit(game_state)
        for credit in report.moves:
            for features, feedback in zip(credit.features, credit.feedback):
                self.learn_features(features, feedback)
        self.save()
        logger.info(
            "Learned from %d moves (black feedback %.3f, white feedback %.3f)",
            len(report.moves),
            report.black_feedback,
            report.white_feedback,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        self._store.save(self._table)

    def reload(self) -> None:
        self._table = self._store.load()

    def reset_table(self, *, backup: bool = True) -> None:
        """Forget everything learned, keeping the old file as a numbered backup."""
        self._table = self._store.reset(backup=backup)

    @property
    def name(self) -> str:
        return f"EvolvingAgent({self.data_path.name})"


__all__ = [
    "DEFAULT_DATA_FILE",
    "DEFAULT_GENERALIZATION",
    "DEFAULT_LEARNING_RATE",
    "EvolvingAgent",
    "MAX_VALUE",
    "TABLE_SIZE",
    "data_index",
]
