"""Agent implementations and the agent registry."""

from __future__ import annotations

from typing import Callable, Dict

from ..config import AGENT_KIND_EVOLVING, AGENT_KIND_SEARCH, AgentConfig
from .base import Agent
from .credit import CreditReport, MoveCredit, assign_credit, outcome_feedback
from .evolving import TABLE_SIZE, EvolvingAgent, data_index
from .features import Features, extract_features, generalized_direction, generalized_place, true_direction
from .search import SearchAgent, score_position, terminal_score
from .storage import TableStore


def _build_search(config: AgentConfig) -> Agent:
    return SearchAgent(depth=config.depth)


def _build_evolving(config: AgentConfig) -> Agent:
    return EvolvingAgent(
        config.data_path,
        learning_rate=config.learning_rate,
        generalization=config.generalization,
        seed=config.seed,
    )


AGENT_KINDS: Dict[str, Callable[[AgentConfig], Agent]] = {
    AGENT_KIND_SEARCH: _build_search,
    AGENT_KIND_EVOLVING: _build_evolving,
}


def create_agent(config: AgentConfig) -> Agent:
    """Create an agent from its configuration.

    Raises:
        ValueError: If the configuration is invalid or names an unknown kind.
    """
    config.validate()
    return AGENT_KINDS[config.kind](config)


__all__ = [
    "AGENT_KINDS",
    "Agent",
    "CreditReport",
    "EvolvingAgent",
    "Features",
    "MoveCredit",
    "SearchAgent",
    "TABLE_SIZE",
    "TableStore",
    "assign_credit",
    "create_agent",
    "data_index",
    "extract_features",
    "generalized_direction",
    "generalized_place",
    "outcome_feedback",
    "score_position",
    "terminal_score",
    "true_direction",
]
