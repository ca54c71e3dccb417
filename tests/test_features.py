import pytest

from conftest import make_state, play_random_game
from reversi import rules
from reversi.agents.features import (
    CANONICAL_DIRECTIONS,
    FEATURE_RADICES,
    Features,
    extract_features,
    generalized_direction,
    generalized_place,
    true_direction,
)
from reversi.exceptions import FeatureRangeError
from reversi.rules import Side
from reversi.state import GameState

EMPTY_ROW = ". . . . . . . ."
WEST = rules.direction_index(-1, 0)
EAST = rules.direction_index(1, 0)


class TestGeneralizedPlace:
    @pytest.mark.parametrize("cell", [(0, 0), (7, 0), (0, 7), (7, 7)])
    def test_corners_share_place_zero(self, cell):
        assert generalized_place(*cell) == 0

    @pytest.mark.parametrize(
        "cell, expected",
        [
            ((1, 0), 1),
            ((0, 1), 1),
            ((3, 0), 3),
            ((1, 1), 4),
            ((2, 1), 5),
            ((3, 1), 6),
            ((2, 2), 7),
            ((3, 2), 8),
            ((5, 3), 8),
            ((3, 3), 9),
            ((4, 4), 9),
        ],
    )
    def test_folded_places(self, cell, expected):
        assert generalized_place(*cell) == expected

    def test_all_places_are_used(self):
        places = {
            generalized_place(x, y)
            for x in range(rules.BOARD_SIZE)
            for y in range(rules.BOARD_SIZE)
        }
        assert places == set(range(10))

    def test_off_board_rejected(self):
        with pytest.raises(ValueError):
            generalized_place(8, 0)


class TestGeneralizedDirection:
    def test_unfolded_cell_keeps_direction(self):
        assert generalized_direction(1, 0, 1, 0) == 0
        assert generalized_direction(1, 0, -1, -1) == 5

    def test_mirrored_cell_mirrors_direction(self):
        assert generalized_direction(7, 0, -1, 0) == 0
        assert generalized_direction(0, 7, 0, -1) == 2

    def test_swapped_cell_swaps_direction(self):
        assert generalized_direction(0, 1, 0, 1) == 0
        assert generalized_direction(0, 1, 1, 0) == 2

    def test_true_direction_inverts_fold(self):
        for x in range(rules.BOARD_SIZE):
            for y in range(rules.BOARD_SIZE):
                codes = set()
                for dx, dy in rules.DIRECTIONS:
                    code = generalized_direction(x, y, dx, dy)
                    codes.add(code)
                    assert true_direction(x, y, code) == (dx, dy)
                assert codes == set(range(len(CANONICAL_DIRECTIONS)))

    def test_invalid_direction_rejected(self):
        with pytest.raises(ValueError):
            generalized_direction(0, 0, 0, 0)
        with pytest.raises(ValueError):
            generalized_direction(0, 0, 2, 0)
        with pytest.raises(FeatureRangeError):
            true_direction(0, 0, 8)


class TestExtractFeatures:
    def test_opening_candidate(self, fresh_state):
        features = extract_features(fresh_state, 5, 3)

        assert len(features) == 8
        assert features[WEST] == Features(8, 2, 2, 1, 1, 1)
        assert features[rules.direction_index(-1, 1)] == Features(8, 1, 1, 0, 0, 1)
        assert features[EAST].as_tuple()[2:] == (0, 0, 0, 0)
        assert all(f.generalized_place == 8 for f in features)

    def test_opponent_run_ended_by_empty_does_not_count(self):
        game_state = make_state(". W W . . . . .", *[EMPTY_ROW] * 7)

        features = extract_features(game_state, 3, 0, Side.BLACK)

        assert features[WEST] == Features(3, 4, 2, 0, 0, 1)

    def test_islands_counted_past_first_empty(self):
        game_state = make_state(". W . B B . W .", *[EMPTY_ROW] * 7)

        features = extract_features(game_state, 0, 0, Side.BLACK)

        assert features[EAST] == Features(0, 0, 1, 0, 0, 3)

    @pytest.mark.parametrize("side, affected", [(Side.WHITE, 0), (Side.BLACK, 1)])
    def test_colour_changes_and_affected_disks(self, side, affected):
        game_state = make_state(". W B W B . . .", *[EMPTY_ROW] * 7)

        features = extract_features(game_state, 0, 0, side)

        assert features[EAST] == Features(0, 0, 4, affected, 3, 1)

    def test_defaults_to_side_to_move(self, fresh_state):
        assert extract_features(fresh_state, 5, 3) == extract_features(fresh_state, 5, 3, Side.BLACK)

    @pytest.mark.parametrize("seed", range(6))
    def test_features_stay_in_range(self, seed):
        game_state = play_random_game(seed)
        replay = GameState()
        for move in game_state.history:
            placement = move.placement
            for features in extract_features(replay, placement.x, placement.y):
                features.validate()
            replay.make_move(placement.x, placement.y)

    @pytest.mark.parametrize("seed", range(4))
    @pytest.mark.parametrize("mirror", ["x", "y"])
    def test_mirrored_positions_share_features(self, seed, mirror):
        game_state = play_random_game(seed, max_moves=14)
        side = game_state.current_turn
        if side == Side.NONE:
            pytest.skip("random game ended early")

        def transform(x, y):
            last = rules.BOARD_SIZE - 1
            return (last - x, y) if mirror == "x" else (x, last - y)

        cells = [Side.NONE] * rules.CELL_COUNT
        for x in range(rules.BOARD_SIZE):
            for y in range(rules.BOARD_SIZE):
                tx, ty = transform(x, y)
                cells[ty * rules.BOARD_SIZE + tx] = game_state.get(x, y)
        mirrored = GameState.from_board(cells, side)

        for x, y in game_state.legal_moves():
            original = sorted(f.as_tuple() for f in extract_features(game_state, x, y, side))
            image = sorted(f.as_tuple() for f in extract_features(mirrored, *transform(x, y), side))
            assert original == image


class TestFeaturesValidate:
    def test_valid_vector_passes(self):
        Features(*(radix - 1 for radix in FEATURE_RADICES)).validate()

    def test_out_of_range_value_names_field(self):
        with pytest.raises(FeatureRangeError) as info:
            Features(10, 0, 0, 0, 0, 0).validate()
        assert info.value.name == "generalized_place"
        assert info.value.limit == 10

        with pytest.raises(FeatureRangeError):
            Features(0, 0, 0, 0, 0, -1).validate()
