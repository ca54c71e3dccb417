"""Game driver: plays agents against each other and triggers learning."""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .agents import Agent, create_agent
from .config import TrainingConfig
from .exceptions import IllegalMoveError
from .rules import Side
from .state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    winner: Side
    black_disks: int
    white_disks: int
    moves: int


def result_of(game_state: GameState) -> MatchResult:
    return MatchResult(
        winner=game_state.winner(),
        black_disks=game_state.count(Side.BLACK),
        white_disks=game_state.count(Side.WHITE),
        moves=len(game_state.history),
    )


def play_game(
    black: Agent,
    white: Agent,
    game_state: Optional[GameState] = None,
    *,
    learn: bool = True,
) -> GameState:
    """Play one game to the end and return the finished state.

    Each distinct agent learns from the finished game exactly once, so a
    self-playing agent passed as both ``black`` and ``white`` is not trained
    twice on the same game.

    Raises:
        IllegalMoveError: If an agent returns no move or a move the rules reject.
    """
    current = GameState() if game_state is None else game_state
    agents: Dict[Side, Agent] = {Side.BLACK: black, Side.WHITE: white}

    while not current.is_game_over:
        agent = agents[current.current_turn]
        cell = agent.decide(current)
        if cell is None:
            raise IllegalMoveError(agent.name, None)
        move = current.make_move(*cell)
        if move.is_null:
            raise IllegalMoveError(agent.name, cell)

    if learn:
        for agent in _distinct(black, white):
            agent.learn(current)
    return current


def _distinct(*agents: Agent) -> Tuple[Agent, ...]:
    unique: Dict[int, Agent] = {}
    for agent in agents:
        unique.setdefault(id(agent), agent)
    return tuple(unique.values())


@dataclass
class SimulationConfig:
    games: int = 1
    black: Optional[Agent] = None
    white: Optional[Agent] = None
    learn: bool = True

    @classmethod
    def from_training_config(cls, config: TrainingConfig) -> SimulationConfig:
        config.validate()
        black = create_agent(config.black)
        white = black if config.white is None else create_agent(config.white)
        return cls(games=config.games, black=black, white=white)


def run(config: SimulationConfig) -> Iterator[MatchResult]:
    """Play ``config.games`` games back to back, yielding each result."""
    if config.games < 1:
        raise ValueError("Number of games must be at least 1")
    if config.black is None or config.white is None:
        raise ValueError("Both agents must be provided")

    for number in range(config.games):
        finished = play_game(config.black, config.white, learn=config.learn)
        result = result_of(finished)
        logger.info(
            "Game %d: %s wins %d-%d in %d moves",
            number + 1,
            result.winner.name if result.winner != Side.NONE else "nobody",
            result.black_disks,
            result.white_disks,
            result.moves,
        )
        yield result


def summarize(results: Iterable[MatchResult]) -> Dict[str, int]:
    """Count black wins, white wins and draws."""
    counts = Counter(result.winner for result in results)
    return {
        "black_wins": counts[Side.BLACK],
        "white_wins": counts[Side.WHITE],
        "draws": counts[Side.NONE],
        "games": sum(counts.values()),
    }


__all__ = [
    "MatchResult",
    "SimulationConfig",
    "play_game",
    "result_of",
    "run",
    "summarize",
]
