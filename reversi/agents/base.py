"""Agent capability interface shared by the search and learning agents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..state import Cell, GameState


class Agent(ABC):
    """Abstract base class for Reversi agents.

    The driver asks :meth:`decide` for a cell each turn and calls
    :meth:`learn` once the game is over.
    """

    @abstractmethod
    def decide(self, game_state: GameState) -> Optional[Cell]:
        """Pick a cell for the side to move.

        Args:
            game_state: The current game state. It must not be mutated.

        Returns:
            The chosen ``(x, y)`` cell, or ``None`` when nobody can move.
        """
        ...

    def learn(self, game_state: GameState) -> None:
        """Post-game hook. Non-learning agents ignore it."""

    def __call__(self, game_state: GameState) -> Optional[Cell]:
        return self.decide(game_state)

    @property
    def name(self) -> str:
        """Return the agent's name for display purposes."""
        return self.__class__.__name__


__all__ = ["Agent"]
