#!/usr/bin/env python
"""Play Reversi against an agent in the terminal.

Usage:
    python scripts/play.py
    python scripts/play.py --opponent search --depth 4
    python scripts/play.py --you-play white --data-path ReversiEvolvingAI.dat

Commands during the game:
    x y     place a disk at column x, row y (0-7)
    undo    take back the last move
    redo    replay a move taken back
    quit    leave the game

The evolving agent learns from the finished game and saves its table.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from reversi.agents import Agent, create_agent
from reversi.config import AgentConfig
from reversi.exceptions import IllegalMoveError
from reversi.formatting import format_board, format_move
from reversi.logging_config import setup_logging
from reversi.rules import Side
from reversi.state import GameState

logger = logging.getLogger(__name__)


def read_command(game_state: GameState) -> str | tuple[int, int]:
    """Prompt until the user enters a legal cell or a command."""
    while True:
        try:
            text = input(f"\n{game_state.current_turn.name} to move (x y / undo / redo / quit): ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            return "quit"

        if text in ("undo", "redo", "quit"):
            return text
        parts = text.replace(",", " ").split()
        try:
            x, y = (int(part) for part in parts)
        except ValueError:
            print("Enter two numbers, e.g. '5 3'.")
            continue
        if not game_state.can_make_move(x, y):
            print(f"({x}, {y}) is not a legal move.")
            continue
        return x, y


def play_interactive_game(agent: Agent, human: Side) -> GameState:
    game_state = GameState()
    while not game_state.is_game_over:
        print()
        print(format_board(game_state))

        if game_state.current_turn != human:
            cell = agent.decide(game_state)
            if cell is None:
                raise IllegalMoveError(agent.name, None)
            move = game_state.make_move(*cell)
            if move.is_null:
                raise IllegalMoveError(agent.name, cell)
            print(f"\n{agent.name} plays {format_move(move)}")
            continue

        command = read_command(game_state)
        if command == "quit":
            return game_state
        if command == "undo":
            # Take back the agent's reply as well so it is the human's turn again.
            game_state.undo()
            while game_state.can_undo() and game_state.current_turn != human:
                game_state.undo()
        elif command == "redo":
            if game_state.redo().is_null:
                print("Nothing to redo.")
        else:
            game_state.make_move(*command)

    print()
    print(format_board(game_state))
    winner = game_state.winner()
    print(
        f"\nGame over: {winner.name if winner != Side.NONE else 'draw'} "
        f"({game_state.count(Side.BLACK)}-{game_state.count(Side.WHITE)})"
    )
    agent.learn(game_state)
    return game_state


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Play Reversi against an agent",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--opponent",
        type=str,
        choices=["evolving", "search"],
        default="evolving",
        help="Agent to play against (default: evolving)",
    )
    parser.add_argument("--depth", type=int, default=3, help="Search depth (default: 3)")
    parser.add_argument("--data-path", type=str, default="ReversiEvolvingAI.dat", help="Evolving agent table file")
    parser.add_argument("--learning-rate", type=float, default=0.1, help="Evolving agent learning rate")
    parser.add_argument(
        "--generalization",
        type=float,
        default=0.1,
        help="Evolving agent weak-feature generalization (default: 0.1)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Tie-break seed for the evolving agent")
    parser.add_argument(
        "--you-play",
        type=str,
        choices=["black", "white"],
        default="black",
        help="Your colour; black moves first (default: black)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "WARNING")
    config = AgentConfig(
        kind=args.opponent,
        depth=args.depth,
        data_path=args.data_path,
        learning_rate=args.learning_rate,
        generalization=args.generalization,
        seed=args.seed,
    )
    try:
        agent = create_agent(config)
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    human = Side.BLACK if args.you_play == "black" else Side.WHITE
    play_interactive_game(agent, human)
    return 0


if __name__ == "__main__":
    sys.exit(main())
