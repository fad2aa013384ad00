"""Exhaustive minimax search for perfect tic-tac-toe play."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .board import Board, Position
from .game import (
    Game,
    InPlay,
    MoveError,
    Player,
    PlayerSet,
    apply_move,
    is_tie,
    is_win,
)

logger = logging.getLogger(__name__)

WIN, DRAW, LOSS = 1, 0, -1
OPENING_MOVE: Position = (0, 0)


def best_move(player: Player, players: PlayerSet, board: Board) -> Game:
    """Pick the optimal cell for ``player`` and return the game after playing it.

    The empty board always opens in the top-left corner without searching.
    Otherwise each empty cell is scored in row-major order; a forced win is
    taken at once, and among equal scores the first cell found is kept.
    """
    open_cells = board.empty_cells()
    if not open_cells:
        raise MoveError("No moves available on a full board")

    if len(open_cells) == len(board.squares) ** 2:
        logger.debug("%s opens at %s", player, OPENING_MOVE)
        opened = board.place(OPENING_MOVE, player.mark)
        return InPlay(players, players.other(player), opened)

    chosen: Optional[Position] = None
    high_score = LOSS - 1
    for pos in open_cells:
        child = board.place(pos, player.mark)
        score = minimax(player, player, players, child, 0)
        logger.debug("%s at %s scores %d", player, pos, score)
        if score == WIN:
            chosen = pos
            break
        if score > high_score:
            high_score = score
            chosen = pos

    if chosen is None:
        raise MoveError("Search produced no candidate move")
    logger.debug("%s plays %s", player, chosen)
    return apply_move(chosen, board, player, players)


def minimax(
    turn: Player,
    maximizing: Player,
    players: PlayerSet,
    board: Board,
    depth: int,
) -> int:
    """Game value of ``board`` just after ``turn`` moved, seen by ``maximizing``.

    Returns 1 for a forced win, 0 for a draw and -1 for a forced loss.
    """
    if is_tie(board):
        _trace(depth, board, "tie", DRAW)
        return DRAW
    if is_win(turn, board):
        score = WIN if turn == maximizing else LOSS
        _trace(depth, board, f"win for {turn}", score)
        return score

    next_turn = players.other(turn)
    maximizing_node = next_turn == maximizing
    scores: List[int] = []
    for pos in board.empty_cells():
        child = board.place(pos, next_turn.mark)
        result = minimax(next_turn, maximizing, players, child, depth + 1)
        if maximizing_node and result == WIN:
            return WIN
        if not maximizing_node and result == LOSS:
            return LOSS
        scores.append(result)

    if not scores:
        return DRAW
    return max(scores) if maximizing_node else min(scores)


def _trace(depth: int, board: Board, reason: str, score: int) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        flat = board.to_string().replace("\n", "/")
        logger.debug("%s%s: %s -> %d", "  " * depth, flat, reason, score)


@dataclass
class MinimaxAI:
    """Computer opponent bound to one side of a game."""

    player: Player

    def play(self, game: Game) -> Game:
        if not isinstance(game, InPlay):
            raise ValueError("Game is not in play")
        if game.turn != self.player:
            raise ValueError("It is not this AI player's turn")
        return best_move(self.player, game.players, game.board)
