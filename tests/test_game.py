"""Unit tests for the rules engine and game state machine."""

import pytest

from tictactoe.board import WINNING_LINES, Board, Cell
from tictactoe.game import (
    GameOverError,
    InPlay,
    PlacementError,
    Player,
    PlayerSet,
    PlayerType,
    Tie,
    Uninitiated,
    Win,
    apply_move,
    board_of,
    cells_for,
    is_terminal,
    is_tie,
    is_win,
    new_game,
    step,
)

PLAYERS = PlayerSet()
X, O = PLAYERS.x, PLAYERS.o


def test_player_equality_includes_type():
    assert Player(Cell.X, PlayerType.HUMAN) == Player(Cell.X, PlayerType.HUMAN)
    assert Player(Cell.X, PlayerType.HUMAN) != Player(Cell.X, PlayerType.COMPUTER)
    assert Player(Cell.X) != Player(Cell.O)


def test_player_set_other():
    players = PlayerSet.of(PlayerType.HUMAN, PlayerType.COMPUTER)
    assert players.other(players.x) == players.o
    assert players.other(players.o) == players.x


def test_player_set_requires_one_of_each_mark():
    with pytest.raises(ValueError):
        PlayerSet(Player(Cell.O), Player(Cell.X))
    with pytest.raises(ValueError):
        Player(Cell.EMPTY)


def test_cells_for_player():
    board = Board.from_string("X-O\nOO-\nXXX")
    assert cells_for(board, X) == [(0, 0), (2, 0), (2, 1), (2, 2)]


@pytest.mark.parametrize("line", WINNING_LINES)
def test_every_line_is_a_win(line):
    board = Board()
    for pos in line:
        board = board.place(pos, Cell.O)
    assert is_win(O, board)
    assert not is_win(X, board)


def test_win_detection_on_fixtures():
    assert not is_win(O, Board())
    assert not is_win(O, Board.from_string("XOX\nOOX\nXXO"))
    assert is_win(O, Board.from_string("O-O\nXOX\nXXO"))
    assert not is_win(X, Board.from_string("O-O\nXOX\nXXO"))
    assert is_win(O, Board.from_string("O-O\nOXX\nOXX"))
    assert is_win(X, Board.from_string("O-X\nOX-\nXOX"))


def test_tie_detection():
    assert is_tie(Board.from_string("XOX\nOOX\nXXO"))
    assert not is_tie(Board.from_string("X-O\nOO-\nXXX"))
    assert not is_tie(Board())
    # Full board with a completed line is a win, not a tie.
    assert not is_tie(Board.from_string("XXX\nOOX\nXOO"))


def test_move_completing_a_line_wins():
    board = Board.from_string("X-O\nOO-\nX-X")
    result = apply_move((2, 1), board, X, PLAYERS)
    assert result == Win(X, Board.from_string("X-O\nOO-\nXXX"))


def test_move_filling_board_ties():
    board = Board.from_string("-OX\nOOX\nXXO")
    result = apply_move((0, 0), board, X, PLAYERS)
    assert result == Tie(Board.from_string("XOX\nOOX\nXXO"))


def test_move_on_empty_board_advances_turn():
    result = apply_move((0, 0), Board(), X, PLAYERS)
    assert result == InPlay(PLAYERS, O, Board.from_string("X--\n---\n---"))


def test_move_on_occupied_cell_fails():
    board = Board.from_string("X--\n---\n---")
    with pytest.raises(PlacementError):
        apply_move((0, 0), board, O, PLAYERS)
    assert board == Board.from_string("X--\n---\n---")


def test_new_game_starts_with_x():
    game = new_game(PLAYERS)
    assert game.turn == X
    assert game.board == Board()


def test_step_applies_human_move():
    game = step(new_game(PLAYERS), (1, 1))
    assert isinstance(game, InPlay)
    assert game.turn == O
    assert game.board[(1, 1)] is Cell.X


def test_step_requires_position_for_humans():
    with pytest.raises(ValueError):
        step(new_game(PLAYERS))


def test_step_computer_chooses_its_own_move():
    players = PlayerSet.of(PlayerType.COMPUTER, PlayerType.HUMAN)
    game = step(new_game(players))
    assert game == InPlay(players, players.o, Board.from_string("X--\n---\n---"))
    with pytest.raises(ValueError):
        step(new_game(players), (1, 1))


def test_step_rejects_terminal_and_uninitiated_games():
    with pytest.raises(GameOverError):
        step(Tie(Board.from_string("XOX\nOOX\nXXO")), (0, 0))
    with pytest.raises(GameOverError):
        step(Win(X, Board.from_string("X-O\nOO-\nXXX")), (0, 1))
    with pytest.raises(ValueError):
        step(Uninitiated(), (0, 0))


def test_terminal_helpers():
    tie_board = Board.from_string("XOX\nOOX\nXXO")
    assert is_terminal(Tie(tie_board))
    assert is_terminal(Win(X, tie_board))
    assert not is_terminal(new_game(PLAYERS))
    assert not is_terminal(Uninitiated())
    assert board_of(Tie(tie_board)) == tie_board
    assert board_of(Uninitiated()) is None


def _has_line(board, mark):
    rows = [list(row) for row in board.squares]
    cols = [list(col) for col in zip(*board.squares)]
    diagonals = [
        [board.squares[i][i] for i in range(3)],
        [board.squares[i][2 - i] for i in range(3)],
    ]
    return any(all(cell is mark for cell in line) for line in rows + cols + diagonals)


def test_every_reachable_board_obeys_the_rules():
    seen = {Board()}
    pending = [new_game(PLAYERS)]
    while pending:
        game = pending.pop()
        for pos in game.board.empty_cells():
            result = apply_move(pos, game.board, game.turn, PLAYERS)
            board = result.board
            x_line, o_line = _has_line(board, Cell.X), _has_line(board, Cell.O)

            assert is_win(X, board) == x_line
            assert is_win(O, board) == o_line
            full = not board.empty_cells()
            assert is_tie(board) == (full and not x_line and not o_line)
            assert Board.from_string(board.to_string()) == board

            if isinstance(result, Win):
                assert result.winner == game.turn
                assert _has_line(board, game.turn.mark)
                assert not _has_line(board, PLAYERS.other(game.turn).mark)
            elif isinstance(result, Tie):
                assert not board.empty_cells() and not x_line and not o_line
            else:
                assert result.turn == PLAYERS.other(game.turn)
                assert board.empty_cells() and not x_line and not o_line

            if board not in seen:
                seen.add(board)
                if isinstance(result, InPlay):
                    pending.append(result)
    assert len(seen) == 5478
