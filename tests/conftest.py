"""
Pytest configuration and shared fixtures.

Provides board builders, randomly played games and temporary table paths
used across the engine, agent and driver tests.
"""

from __future__ import annotations

import random

import pytest

from reversi.formatting import parse_board
from reversi.rules import Side
from reversi.state import GameState


def make_state(*rows: str, turn: Side = Side.BLACK) -> GameState:
    """Build a position from eight text rows (y=0 first)."""
    return GameState.from_board(parse_board(rows), turn)


def play_random_game(seed: int, max_moves: int | None = None) -> GameState:
    """Play uniformly random legal moves from the opening."""
    rng = random.Random(seed)
    game_state = GameState()
    played = 0
    while not game_state.is_game_over and (max_moves is None or played < max_moves):
        x, y = rng.choice(game_state.legal_moves())
        game_state.make_move(x, y)
        played += 1
    return game_state


@pytest.fixture
def fresh_state():
    return GameState()


@pytest.fixture
def finished_game():
    """A complete game played with random moves."""
    game_state = play_random_game(seed=7)
    assert game_state.is_game_over
    return game_state


@pytest.fixture
def decisive_game():
    """The first random game (from seed 7 on) that does not end in a draw."""
    seed = 7
    while True:
        game_state = play_random_game(seed)
        if game_state.winner() != Side.NONE:
            return game_state
        seed += 1


@pytest.fixture
def table_path(tmp_path):
    return tmp_path / "evolving.dat"
