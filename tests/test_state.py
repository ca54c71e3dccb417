import pytest

from conftest import make_state
from reversi import rules
from reversi.rules import Side
from reversi.state import NO_MOVE, Change, GameState

EMPTY_ROW = ". . . . . . . ."


def test_initial_state_setup(fresh_state):
    assert fresh_state.current_turn == Side.BLACK
    assert not fresh_state.is_game_over
    assert fresh_state.history == ()
    assert fresh_state.get(3, 3) == Side.BLACK
    assert fresh_state.get(4, 4) == Side.BLACK
    assert fresh_state.get(4, 3) == Side.WHITE
    assert fresh_state.get(3, 4) == Side.WHITE
    assert fresh_state.count(Side.BLACK) == 2
    assert fresh_state.count(Side.WHITE) == 2
    assert fresh_state.count(Side.NONE) == rules.CELL_COUNT - 4


def test_opening_legal_moves_for_black(fresh_state):
    legal = {
        (x, y)
        for x in range(rules.BOARD_SIZE)
        for y in range(rules.BOARD_SIZE)
        if fresh_state.can_make_move(x, y)
    }
    assert legal == {(5, 3), (2, 4), (3, 5), (4, 2)}


def test_legal_moves_scan_x_then_y(fresh_state):
    assert fresh_state.legal_moves() == [(2, 4), (3, 5), (4, 2), (5, 3)]


def test_capture_records_placement_then_flips(fresh_state):
    move = fresh_state.make_move(5, 3)

    assert move.turn == Side.BLACK
    assert move.changes == (
        Change(5, 3, Side.NONE, Side.BLACK),
        Change(4, 3, Side.WHITE, Side.BLACK),
    )
    assert move.ends == (Change(3, 3, Side.BLACK, Side.BLACK),)
    assert fresh_state.current_turn == Side.WHITE
    assert fresh_state.get(4, 3) == Side.BLACK
    assert fresh_state.history == (move,)


def test_illegal_move_returns_sentinel_without_mutation(fresh_state):
    before = fresh_state.cells

    assert fresh_state.make_move(0, 0) is NO_MOVE
    assert fresh_state.make_move(3, 3) is NO_MOVE
    assert fresh_state.make_move(-1, 9) is NO_MOVE

    assert fresh_state.cells == before
    assert fresh_state.current_turn == Side.BLACK
    assert fresh_state.history == ()


def test_can_make_move_rejects_none_side_and_occupied(fresh_state):
    assert not fresh_state.can_make_move(5, 3, Side.NONE)
    assert not fresh_state.can_make_move(3, 3)
    assert fresh_state.can_make_move(4, 5, Side.WHITE)


def test_get_off_board_reads_empty(fresh_state):
    assert fresh_state.get(-1, 0) == Side.NONE
    assert fresh_state.get(0, 8) == Side.NONE


def test_undo_restores_board_and_turn(fresh_state):
    before = fresh_state.cells
    move = fresh_state.make_move(5, 3)

    undone = fresh_state.undo()

    assert undone == move
    assert fresh_state.cells == before
    assert fresh_state.current_turn == Side.BLACK
    assert fresh_state.can_redo()
    assert not fresh_state.can_undo()


def test_redo_restores_post_move_state(fresh_state):
    fresh_state.make_move(5, 3)
    after = fresh_state.cells
    fresh_state.undo()

    redone = fresh_state.redo()

    assert not redone.is_null
    assert fresh_state.cells == after
    assert fresh_state.current_turn == Side.WHITE
    assert not fresh_state.can_redo()


def test_new_move_clears_redo_stack(fresh_state):
    fresh_state.make_move(5, 3)
    fresh_state.undo()
    assert fresh_state.can_redo()

    fresh_state.make_move(2, 4)

    assert not fresh_state.can_redo()
    assert fresh_state.redo() is NO_MOVE


def test_undo_and_redo_on_empty_stacks_are_noops(fresh_state):
    assert fresh_state.undo() is NO_MOVE
    assert fresh_state.redo() is NO_MOVE


def test_reset_restores_opening(fresh_state):
    fresh_state.make_move(5, 3)
    fresh_state.make_move(5, 4)

    fresh_state.reset()

    assert fresh_state.cells == GameState().cells
    assert fresh_state.history == ()
    assert fresh_state.current_turn == Side.BLACK


def test_clone_is_independent(fresh_state):
    clone = fresh_state.clone()
    clone.make_move(5, 3)

    assert fresh_state.get(5, 3) == Side.NONE
    assert fresh_state.history == ()
    assert len(clone.history) == 1


def test_winner_reports_current_leader(fresh_state):
    assert fresh_state.winner() == Side.NONE
    fresh_state.make_move(5, 3)
    assert fresh_state.winner() == Side.BLACK


def test_move_that_removes_last_opponent_disk_ends_game():
    game_state = make_state(
        ". W B . . . . .",
        *[EMPTY_ROW] * 7,
    )

    move = game_state.make_move(0, 0)

    assert move.turn == Side.BLACK
    assert game_state.is_game_over
    assert game_state.current_turn == Side.NONE
    assert game_state.winner() == Side.BLACK
    assert game_state.legal_moves() == []


def test_game_over_blocks_moves_undo_and_redo():
    game_state = make_state(
        ". W B . . . . .",
        *[EMPTY_ROW] * 7,
    )
    game_state.make_move(0, 0)

    assert not game_state.can_undo()
    assert game_state.undo() is NO_MOVE
    assert game_state.redo() is NO_MOVE
    assert game_state.make_move(3, 0) is NO_MOVE


def test_turn_stays_when_opponent_must_pass():
    game_state = make_state(
        ". W B . . . . .",
        *[EMPTY_ROW] * 6,
        "B W . . . . . .",
    )

    game_state.make_move(0, 0)

    assert not game_state.is_game_over
    assert game_state.current_turn == Side.BLACK
    assert game_state.legal_moves() == [(2, 7)]


def test_from_board_without_any_moves_is_game_over():
    game_state = make_state(
        "B B . . . . . .",
        *[EMPTY_ROW] * 7,
    )

    assert game_state.is_game_over
    assert game_state.current_turn == Side.NONE


def test_from_board_passes_turn_when_side_cannot_move():
    game_state = make_state(
        "B W . . . . . .",
        *[EMPTY_ROW] * 7,
        turn=Side.WHITE,
    )

    assert not game_state.is_game_over
    assert game_state.current_turn == Side.BLACK
    assert game_state.legal_moves() == [(2, 0)]


def test_from_board_rejects_bad_input():
    with pytest.raises(ValueError, match="64 cells"):
        GameState.from_board([Side.NONE] * 10)
    with pytest.raises(ValueError, match="BLACK or WHITE"):
        GameState.from_board([Side.NONE] * rules.CELL_COUNT, Side.NONE)


def test_starting_position_of_opening_game(fresh_state):
    fresh_state.make_move(5, 3)

    start = fresh_state.starting_position()

    assert start.cells == GameState().cells
    assert start.current_turn == Side.BLACK
    assert start.history == ()


def test_from_board_start_replays_to_current_board():
    game_state = make_state(
        ". . . . . . . .",
        ". . . . . . . .",
        ". . . . . . . .",
        ". . . B W . . .",
        ". . . W B . . .",
        *[EMPTY_ROW] * 3,
        turn=Side.WHITE,
    )
    first = game_state.make_move(4, 5)
    game_state.make_move(*game_state.legal_moves()[0])

    replay = game_state.starting_position()
    assert replay.current_turn == Side.WHITE
    assert replay.cells == GameState().cells
    for move in game_state.history:
        assert replay.make_move(move.placement.x, move.placement.y) == move
    assert replay.cells == game_state.cells
    assert first.turn == Side.WHITE


def test_clone_keeps_start_and_reset_restores_opening():
    game_state = make_state(
        "B W . . . . . .",
        *[EMPTY_ROW] * 7,
        turn=Side.WHITE,
    )
    start = game_state.cells

    clone = game_state.clone()
    clone.make_move(2, 0)
    assert clone.starting_position().cells == start
    assert clone.starting_position().current_turn == Side.BLACK

    game_state.reset()
    assert game_state.starting_position().cells == GameState().cells
