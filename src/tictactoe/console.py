"""Interactive console front end: menu, move entry and the game loop."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Tuple

from .board import COLUMN_LABELS, ROW_LABELS, Position, render_board
from .game import (
    Game,
    InPlay,
    PlacementError,
    PlayerSet,
    PlayerType,
    Tie,
    Uninitiated,
    Win,
    new_game,
    step,
)

logger = logging.getLogger(__name__)

HUMAN, COMPUTER = PlayerType.HUMAN, PlayerType.COMPUTER

MENU_OPTIONS: Dict[int, Tuple[PlayerType, PlayerType]] = {
    1: (HUMAN, COMPUTER),
    2: (HUMAN, HUMAN),
    3: (COMPUTER, HUMAN),
}

MENU_TEXT = "\n".join(
    [
        "Tic Tac Toe. Enter an option: (X goes first)",
        "1. X: Human, O: Computer",
        "2. X: Human, O: Human",
        "3. X: Computer, O: Human",
    ]
)

MOVE_FORMAT_HINT = "Please enter Letter (A-C) & Number (1-3) format, e.g. A1, C2"


def parse_menu_choice(text: str) -> PlayerSet:
    """Map a menu answer ('1', '2' or '3') to the session's players."""
    try:
        option = int(text.strip())
    except ValueError as exc:
        raise ValueError("Please enter a number") from exc
    if option not in MENU_OPTIONS:
        raise ValueError("Invalid option, try again")
    return PlayerSet.of(*MENU_OPTIONS[option])


def parse_position(text: str) -> Position:
    """Parse a move token like 'b3' into (row, col)."""
    token = text.strip().upper()
    if len(token) != 2:
        raise ValueError(MOVE_FORMAT_HINT)
    letter, number = token
    if letter not in ROW_LABELS or number not in COLUMN_LABELS:
        raise ValueError(MOVE_FORMAT_HINT)
    return ROW_LABELS.index(letter), COLUMN_LABELS.index(number)


class ConsoleGame:
    """Runs one session against injectable input/output callables."""

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self._input = input_fn
        self._output = output_fn

    def run(self) -> Game:
        game: Game = Uninitiated()
        try:
            game = new_game(self.choose_players())
            logger.info("Console game started: %s", game.players)
            while isinstance(game, InPlay):
                if game.turn.is_computer:
                    game = step(game)
                else:
                    game = self.human_move(game)
            self.announce(game)
        except EOFError:
            logger.info("Input closed, leaving the game")
        self._output("Thanks for playing!")
        return game

    def choose_players(self) -> PlayerSet:
        while True:
            self._output(MENU_TEXT)
            try:
                return parse_menu_choice(self._input("> "))
            except ValueError as exc:
                self._output(str(exc))

    def human_move(self, game: InPlay) -> Game:
        while True:
            self._output(render_board(game.board))
            answer = self._input(f"{game.turn}, please enter move A1 thru C3: ")
            try:
                pos = parse_position(answer)
            except ValueError as exc:
                self._output(str(exc))
                continue
            try:
                return step(game, pos)
            except PlacementError:
                self._output("Can't move there. Please choose another move.")

    def announce(self, game: Game) -> None:
        if isinstance(game, Win):
            self._output(f"{game.winner} Wins!")
            self._output(render_board(game.board))
        elif isinstance(game, Tie):
            self._output("Game is tied")
            self._output(render_board(game.board))
        elif isinstance(game, (InPlay, Uninitiated)):
            raise ValueError(f"Game has not finished: {game!r}")
        else:
            raise TypeError(f"Unknown game state: {game!r}")
        logger.info("Console game finished: %s", type(game).__name__)


def main() -> int:
    ConsoleGame().run()
    return 0
