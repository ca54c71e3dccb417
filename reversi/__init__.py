"""Reversi rules engine with a minimax agent and a self-trained evaluator."""

from . import agents, config, exceptions, formatting, rules, simulate, state
from .rules import Side
from .state import NO_MOVE, Change, GameState, Move

__all__ = [
    "Change",
    "GameState",
    "Move",
    "NO_MOVE",
    "Side",
    "agents",
    "config",
    "exceptions",
    "formatting",
    "rules",
    "simulate",
    "state",
]
