"""Configuration dataclasses for agents and training sessions.

Both configs load from plain dicts or YAML files; unknown keys are ignored
so one YAML file can carry settings for several tools.
"""

from __future__ import annotations

import dataclasses
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

AGENT_KIND_EVOLVING = "evolving"
AGENT_KIND_SEARCH = "search"
AGENT_KIND_NAMES = (AGENT_KIND_EVOLVING, AGENT_KIND_SEARCH)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _known_fields(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    known = {f.name for f in dataclasses.fields(cls)}
    return {k: v for k, v in data.items() if k in known}


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Read a YAML mapping; an empty file gives an empty dict."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping, got {type(data).__name__}")
    return data


@dataclass
class AgentConfig:
    """Settings for one agent.

    Attributes:
        kind: "evolving" (learned table) or "search" (alpha-beta).
        depth: Search depth for the search agent.
        data_path: Table file for the evolving agent.
        learning_rate: Evolving agent learning rate, clamped to [0, 1].
        generalization: Evolving agent generalization, clamped to [0, 1].
        seed: Tie-break seed for the evolving agent; None draws from OS entropy.
    """

    kind: str = AGENT_KIND_EVOLVING
    depth: int = 3
    data_path: str = "ReversiEvolvingAI.dat"
    learning_rate: float = 0.1
    generalization: float = 0.1
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AgentConfig:
        return cls(**_known_fields(cls, data))

    @classmethod
    def from_yaml(cls, path: str | Path) -> AgentConfig:
        return cls.from_dict(load_yaml(path))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        if self.kind not in AGENT_KIND_NAMES:
            raise ValueError(f"kind must be one of {AGENT_KIND_NAMES}, got {self.kind!r}")
        if self.depth < 0:
            raise ValueError(f"depth must be >= 0, got {self.depth}")
        if not self.data_path:
            raise ValueError("data_path must not be empty")


@dataclass
class TrainingConfig:
    """Settings for a series of games between two agents.

    ``white=None`` means self-play: the black agent instance plays both sides.
    """

    games: int = 100
    black: AgentConfig = field(default_factory=AgentConfig)
    white: Optional[AgentConfig] = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrainingConfig:
        data = dict(data)
        if isinstance(data.get("black"), dict):
            data["black"] = AgentConfig.from_dict(data["black"])
        if isinstance(data.get("white"), dict):
            data["white"] = AgentConfig.from_dict(data["white"])
        return cls(**_known_fields(cls, data))

    @classmethod
    def from_yaml(cls, path: str | Path) -> TrainingConfig:
        return cls.from_dict(load_yaml(path))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        if self.games < 1:
            raise ValueError(f"games must be >= 1, got {self.games}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}")
        self.black.validate()
        if self.white is not None:
            self.white.validate()


__all__ = [
    "AGENT_KIND_EVOLVING",
    "AGENT_KIND_NAMES",
    "AGENT_KIND_SEARCH",
    "AgentConfig",
    "TrainingConfig",
    "load_yaml",
]
