"""Tic-tac-toe game engine, minimax opponent and web application."""

from .ai import MinimaxAI, best_move
from .board import Board, BoardParseError, Cell
from .game import (
    Game,
    GameOverError,
    InPlay,
    MoveError,
    PlacementError,
    Player,
    PlayerSet,
    PlayerType,
    Tie,
    Uninitiated,
    Win,
    apply_move,
    new_game,
    step,
)
from .ui import app

__all__ = [
    "Board",
    "BoardParseError",
    "Cell",
    "Game",
    "GameOverError",
    "InPlay",
    "MinimaxAI",
    "MoveError",
    "PlacementError",
    "Player",
    "PlayerSet",
    "PlayerType",
    "Tie",
    "Uninitiated",
    "Win",
    "app",
    "apply_move",
    "best_move",
    "new_game",
    "step",
]
