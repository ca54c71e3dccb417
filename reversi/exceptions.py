"""Custom exception classes for the Reversi engine and agents."""

from __future__ import annotations


class ReversiError(Exception):
    """Base exception for all Reversi errors."""


class InvariantViolationError(ReversiError):
    """Raised when an internal invariant is broken.

    These indicate a defect in the state machine or in its caller and abort
    the current operation.
    """


class HistoryMismatchError(InvariantViolationError):
    """Raised when a recorded game history cannot be replayed faithfully."""

    def __init__(self, move_number: int, reason: str) -> None:
        self.move_number = move_number
        self.reason = reason
        super().__init__(f"Wrong game history at move {move_number}: {reason}")


class FeatureRangeError(InvariantViolationError):
    """Raised when a feature value falls outside its declared range."""

    def __init__(self, name: str, value: int, limit: int) -> None:
        self.name = name
        self.value = value
        self.limit = limit
        super().__init__(f"Feature {name}={value} out of range [0, {limit})")


class SearchStateError(InvariantViolationError):
    """Raised when the search meets a position that cannot occur."""


class IllegalMoveError(ReversiError):
    """Raised by the game driver when an agent picks a move the rules reject."""

    def __init__(self, agent_name: str, cell: tuple[int, int] | None) -> None:
        self.agent_name = agent_name
        self.cell = cell
        if cell is None:
            message = f"{agent_name} returned no move although it is its turn"
        else:
            message = f"{agent_name} returned illegal move {cell}"
        super().__init__(message)


__all__ = [
    "FeatureRangeError",
    "HistoryMismatchError",
    "IllegalMoveError",
    "InvariantViolationError",
    "ReversiError",
    "SearchStateError",
]
