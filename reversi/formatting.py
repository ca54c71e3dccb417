"""Shared text rendering utilities for boards and moves."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence, Union

from . import rules
from .rules import Side

if TYPE_CHECKING:
    from .state import Cell, GameState, Move

SIDE_SYMBOLS = {Side.NONE: ".", Side.BLACK: "B", Side.WHITE: "W"}
_SYMBOL_SIDES = {symbol: side for side, symbol in SIDE_SYMBOLS.items()}


def format_cell(x: int, y: int) -> str:
    """Return a label like "(5, 3)" for a board coordinate."""
    return f"({x}, {y})"


def format_board(
    board: Union[GameState, Sequence[Side]],
    highlight: Optional[Cell] = None,
) -> str:
    """
    Render a board as eight text rows, y=0 on top.

    Args:
        board: A game state or 64 cells indexed by ``y * 8 + x``
        highlight: Optional cell drawn as ``*`` (e.g. the cell about to be played)

    Returns:
        A multi-line string such as ``". . . B W . . ."`` per row
    """
    cells = board.cells if hasattr(board, "cells") else tuple(board)
    rows = []
    for y in range(rules.BOARD_SIZE):
        symbols = []
        for x in range(rules.BOARD_SIZE):
            if highlight == (x, y):
                symbols.append("*")
            else:
                symbols.append(SIDE_SYMBOLS[Side(cells[y * rules.BOARD_SIZE + x])])
        rows.append(" ".join(symbols))
    return "\n".join(rows)


def parse_board(rows: Sequence[str]) -> list[Side]:
    """Parse eight rows of ``.``/``B``/``W`` (spaces ignored) into 64 cells."""
    cleaned = [row.replace(" ", "") for row in rows]
    if len(cleaned) != rules.BOARD_SIZE or any(len(row) != rules.BOARD_SIZE for row in cleaned):
        raise ValueError("Board text must be 8 rows of 8 cells")
    cells = []
    for row in cleaned:
        for symbol in row:
            if symbol not in _SYMBOL_SIDES:
                raise ValueError(f"Unknown board symbol: {symbol!r}")
            cells.append(_SYMBOL_SIDES[symbol])
    return cells


def format_move(move: Move) -> str:
    """Return e.g. "BLACK (5, 3) flips 1" or "no move"."""
    if move.is_null:
        return "no move"
    placement = move.placement
    return f"{move.turn.name} {format_cell(placement.x, placement.y)} flips {len(move.flips)}"


__all__ = ["SIDE_SYMBOLS", "format_board", "format_cell", "format_move", "parse_board"]
