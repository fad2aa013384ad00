"""Players, game states and the rules that move a game from one state to the next."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .board import WINNING_LINES, Board, Cell, Position


class PlacementError(ValueError):
    """The target cell is already occupied."""


class GameOverError(ValueError):
    """A move was requested on a finished game."""


class MoveError(RuntimeError):
    """Search found no cell to play; only possible on a full board."""


class PlayerType(Enum):
    HUMAN = "human"
    COMPUTER = "computer"


@dataclass(frozen=True)
class Player:
    mark: Cell
    kind: PlayerType = PlayerType.HUMAN

    def __post_init__(self) -> None:
        if self.mark is Cell.EMPTY:
            raise ValueError("A player must place X or O")

    @property
    def is_computer(self) -> bool:
        return self.kind is PlayerType.COMPUTER

    def __str__(self) -> str:
        return self.mark.value


@dataclass(frozen=True)
class PlayerSet:
    x: Player = field(default_factory=lambda: Player(Cell.X))
    o: Player = field(default_factory=lambda: Player(Cell.O))

    def __post_init__(self) -> None:
        if self.x.mark is not Cell.X or self.o.mark is not Cell.O:
            raise ValueError("PlayerSet needs one X player and one O player")

    @classmethod
    def of(cls, x: PlayerType, o: PlayerType) -> "PlayerSet":
        return cls(Player(Cell.X, x), Player(Cell.O, o))

    def other(self, player: Player) -> Player:
        return self.o if player.mark is Cell.X else self.x


# ---------- Game states ----------


@dataclass(frozen=True)
class Uninitiated:
    """No session has been configured yet."""


@dataclass(frozen=True)
class InPlay:
    players: PlayerSet
    turn: Player
    board: Board = field(default_factory=Board)


@dataclass(frozen=True)
class Tie:
    board: Board


@dataclass(frozen=True)
class Win:
    winner: Player
    board: Board


Game = Union[Uninitiated, InPlay, Tie, Win]


# ---------- Rules ----------


def _mark_of(who: Union[Player, Cell]) -> Cell:
    return who.mark if isinstance(who, Player) else who


def cells_for(board: Board, who: Union[Player, Cell]) -> List[Position]:
    return board.cells_for(_mark_of(who))


def is_win(who: Union[Player, Cell], board: Board) -> bool:
    """True when any row, column or diagonal is entirely ``who``'s mark."""
    mark = _mark_of(who)
    return any(all(board[pos] is mark for pos in line) for line in WINNING_LINES)


def is_tie(board: Board) -> bool:
    if board.empty_cells():
        return False
    return not (is_win(Cell.X, board) or is_win(Cell.O, board))


def apply_move(
    pos: Position, board: Board, player: Player, players: PlayerSet
) -> Game:
    """Place ``player``'s mark at ``pos`` and return the resulting game state.

    The input board is never modified; a new board is built for the result.
    Raises PlacementError if the cell is taken.
    """
    if board[pos] is not Cell.EMPTY:
        raise PlacementError(f"Cell {pos} is already occupied")

    new_board = board.place(pos, player.mark)
    if is_win(player, new_board):
        return Win(player, new_board)
    if is_tie(new_board):
        return Tie(new_board)
    return InPlay(players, players.other(player), new_board)


# ---------- State machine ----------


def new_game(players: PlayerSet) -> InPlay:
    return InPlay(players, players.x, Board())


def is_terminal(game: Game) -> bool:
    if isinstance(game, (Tie, Win)):
        return True
    if isinstance(game, (Uninitiated, InPlay)):
        return False
    raise TypeError(f"Unknown game state: {game!r}")


def board_of(game: Game) -> Optional[Board]:
    if isinstance(game, (InPlay, Tie, Win)):
        return game.board
    if isinstance(game, Uninitiated):
        return None
    raise TypeError(f"Unknown game state: {game!r}")


def step(game: Game, pos: Optional[Position] = None) -> Game:
    """Advance ``game`` by one move.

    Human turns need ``pos``; computer turns pick their own move and
    must not be given one.
    """
    if isinstance(game, InPlay):
        if game.turn.is_computer:
            if pos is not None:
                raise ValueError("Computer players choose their own move")
            # Imported here: ai depends on this module.
            from .ai import best_move

            return best_move(game.turn, game.players, game.board)
        if pos is None:
            raise ValueError(f"A position is required for {game.turn}'s move")
        return apply_move(pos, game.board, game.turn, game.players)
    if isinstance(game, (Tie, Win)):
        raise GameOverError("Game already finished")
    if isinstance(game, Uninitiated):
        raise ValueError("Game has not been set up")
    raise TypeError(f"Unknown game state: {game!r}")
