"""Unit tests for CubeXO game rules."""

import logging

import pytest

from cubexo.ai import choose_move
from cubexo.game import CubeXOGame, InvalidMove, LayerOutcome

# Full board with no cross-layer line: X holds layer 0, O holds layer 2,
# layer 1 has no line.
DRAWN_BOARD = (
    "XOXOXOXOX"  # layer 0, X on both diagonals
    "XOXXXOOXO"  # layer 1
    "OXOXOXOXO"  # layer 2, O on both diagonals
)


def _play(game, moves):
    for index in moves:
        game.apply_move(index)


def _nearly_drawn_game():
    game = CubeXOGame(cells=list(DRAWN_BOARD))
    game.layers[0] = LayerOutcome("X", (0, 4, 8))
    game.layers[2] = LayerOutcome("O", (18, 22, 26))
    game.cells[10] = " "
    game.current_player = "O"
    return game


def test_initial_state():
    game = CubeXOGame()
    assert game.current_player == "X"
    assert game.available_moves() == list(range(27))
    assert game.score() == (0, 0)
    assert not game.is_terminal()
    assert game.winning_line is None


def test_turns_alternate():
    game = CubeXOGame()
    game.apply_move(0)
    assert game.cells[0] == "X"
    assert game.current_player == "O"
    game.apply_move(13)
    assert game.cells[13] == "O"
    assert game.current_player == "X"
    assert game.last_move == 13


@pytest.mark.parametrize("index", [-1, 27, 100])
def test_out_of_range_move_rejected(index):
    game = CubeXOGame()
    with pytest.raises(InvalidMove):
        game.apply_move(index)
    assert game == CubeXOGame()


def test_occupied_cell_rejected_without_state_change():
    game = CubeXOGame()
    game.apply_move(4)
    before = game.clone()
    with pytest.raises(InvalidMove):
        game.apply_move(4)
    assert game == before


def test_cross_layer_win_beats_layer_win():
    game = CubeXOGame()
    # X at 0 completes row (0, 1, 2) and the vertical (0, 9, 18) at once
    for i in (1, 2, 9, 18):
        game.cells[i] = "X"
    for i in (4, 5, 13, 23):
        game.cells[i] = "O"

    game.apply_move(0)

    assert game.winner == "X"
    assert game.winning_line == (0, 9, 18)
    assert game.layers[0] == LayerOutcome()
    assert game.score() == (0, 0)
    assert game.is_terminal()


def test_layer_win_freezes_layer():
    game = CubeXOGame()
    _play(game, [0, 9, 1, 10, 2])
    assert game.winner_at(0) == "X"
    assert game.layers[0].line == (0, 1, 2)
    assert game.score() == (1, 0)
    assert game.winner is None
    assert game.current_player == "O"
    assert all(i >= 9 for i in game.available_moves())

    before = game.clone()
    with pytest.raises(InvalidMove):
        game.apply_move(3)
    assert game == before


def test_second_layer_wins_match():
    game = CubeXOGame()
    _play(game, [0, 9, 1, 10, 2, 12, 24, 14, 25, 16])
    assert game.winner is None
    assert game.score() == (1, 0)

    game.apply_move(26)

    assert game.winner == "X"
    assert game.winner_at(2) == "X"
    assert game.layers[2].line == (24, 25, 26)
    # A match won on layers carries no line to highlight
    assert game.winning_line is None
    assert game.score() == (2, 0)


def test_no_moves_after_game_over():
    game = CubeXOGame()
    _play(game, [0, 1, 9, 2, 18])
    assert game.winner == "X"
    assert game.available_moves() == []
    before = game.clone()
    with pytest.raises(InvalidMove):
        game.apply_move(5)
    assert game == before


def test_full_board_is_a_draw():
    game = _nearly_drawn_game()
    game.apply_move(10)
    assert game.drawn is True
    assert game.winner is None
    assert game.winning_line is None
    assert game.winner_at(1) is None
    assert game.is_layer_full(1)
    assert game.is_terminal()


def test_gaps_in_frozen_layers_do_not_end_game():
    game = _nearly_drawn_game()
    # Gap inside the layer X already holds
    game.cells[1] = " "
    game.apply_move(10)
    assert game.drawn is False
    assert game.winner is None
    assert game.current_player == "X"
    assert not game.is_terminal()
    assert game.available_moves() == []
    assert choose_move(game.board_view(), game.layers, player="X") is None


def test_bool_index_rejected():
    game = CubeXOGame()
    with pytest.raises(InvalidMove):
        game.apply_move(True)
    assert game == CubeXOGame()


def test_rejected_move_is_logged(caplog):
    game = CubeXOGame()
    game.apply_move(4)
    with caplog.at_level(logging.DEBUG, logger="cubexo.game"):
        with pytest.raises(InvalidMove):
            game.apply_move(4)
    assert "Cell already occupied" in caplog.text


def test_reset_restores_fresh_state():
    game = CubeXOGame()
    _play(game, [0, 9, 1, 10, 2, 12, 24, 14, 25, 16, 26])
    assert game.is_terminal()

    game.reset()

    assert game == CubeXOGame()
    game.apply_move(13)
    assert game.cells[13] == "X"


def test_board_view_is_a_snapshot():
    game = CubeXOGame()
    view = game.board_view()
    game.apply_move(0)
    assert view[0] == " "
    assert game.board_view()[0] == "X"
