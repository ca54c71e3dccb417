#!/usr/bin/env python
"""Self-play training CLI for the evolving Reversi agent.

Usage:
    python scripts/train.py --games 500
    python scripts/train.py --config configs/default.yaml
    python scripts/train.py --opponent search --depth 2 --games 200

The evolving agent plays against itself (or against the alpha-beta search
agent) and updates its table file after every finished game. Configuration
can be provided via YAML file or command-line arguments (CLI arguments
override YAML values).

Examples:
    # Self-play with default settings
    python scripts/train.py

    # Faster learning, separate table file
    python scripts/train.py --data-path runs/fast.dat --learning-rate 0.3

    # Learn from games against a depth-2 searcher, reproducible tie-breaks
    python scripts/train.py --opponent search --depth 2 --seed 7
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from reversi import simulate
from reversi.config import AGENT_KIND_SEARCH, TrainingConfig, load_yaml
from reversi.logging_config import setup_logging

logger = logging.getLogger(__name__)


def merge_configs(yaml_config: dict[str, Any], cli_args: argparse.Namespace) -> dict[str, Any]:
    """Merge YAML config with CLI arguments; CLI arguments take precedence."""
    config = yaml_config.copy()
    black = dict(config.get("black") or {})

    if cli_args.games is not None:
        config["games"] = cli_args.games
    if cli_args.data_path is not None:
        black["data_path"] = cli_args.data_path
    if cli_args.learning_rate is not None:
        black["learning_rate"] = cli_args.learning_rate
    if cli_args.generalization is not None:
        black["generalization"] = cli_args.generalization
    if cli_args.seed is not None:
        black["seed"] = cli_args.seed
    config["black"] = black

    if cli_args.opponent == "search":
        white = dict(config.get("white") or {})
        white["kind"] = AGENT_KIND_SEARCH
        if cli_args.depth is not None:
            white["depth"] = cli_args.depth
        config["white"] = white
    elif cli_args.opponent == "self":
        config["white"] = None

    if cli_args.verbose:
        config["log_level"] = "DEBUG"

    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Train the evolving Reversi agent by playing games",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=str, default=None, help="Path to YAML configuration file")
    parser.add_argument("--games", type=int, default=None, help="Number of games to play (default: 100)")
    parser.add_argument(
        "--data-path",
        type=str,
        default=None,
        help="Evaluation table file (default: ReversiEvolvingAI.dat)",
    )
    parser.add_argument("--learning-rate", type=float, default=None, help="Learning rate in [0, 1] (default: 0.1)")
    parser.add_argument(
        "--generalization",
        type=float,
        default=None,
        help="Weak-feature generalization in [0, 1] (default: 0.1)",
    )
    parser.add_argument(
        "--opponent",
        type=str,
        choices=["self", "search"],
        default=None,
        help="Who plays white: the same agent or the search agent (default: self)",
    )
    parser.add_argument("--depth", type=int, default=None, help="Search depth of the search opponent (default: 3)")
    parser.add_argument("--seed", type=int, default=None, help="Tie-break seed for reproducible games")
    parser.add_argument("--verbose", action="store_true", help="Log per-move learning feedback")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main training CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    args = build_parser().parse_args(argv)

    try:
        yaml_config = load_yaml(args.config) if args.config else {}
        config = TrainingConfig.from_dict(merge_configs(yaml_config, args))
        config.validate()
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)
    opponent = "itself" if config.white is None else f"{config.white.kind} agent"
    logger.info("Training %s agent against %s for %d games", config.black.kind, opponent, config.games)

    results = list(simulate.run(simulate.SimulationConfig.from_training_config(config)))
    summary = simulate.summarize(results)
    logger.info(
        "Done: black %d, white %d, draws %d",
        summary["black_wins"],
        summary["white_wins"],
        summary["draws"],
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
