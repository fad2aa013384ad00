"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .ai import MinimaxAI
from .board import Board, Cell, position_label
from .game import (
    Game,
    InPlay,
    Player,
    PlayerSet,
    PlayerType,
    Tie,
    Uninitiated,
    Win,
    board_of,
    new_game,
    step,
)

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for one browser's game and who controls each side."""

    players: PlayerSet
    game: Game
    move_log: List[Dict[str, object]] = field(default_factory=list)
    ai_pending: bool = False
    last_active: float = field(default_factory=time.time)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def computer_to_move(self) -> Optional[Player]:
        game = self.game
        if isinstance(game, InPlay) and game.turn.is_computer:
            return game.turn
        return None


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="Tic Tac Toe", description="Tic-tac-toe against a perfect opponent"
)

AI_THINK_DELAY: Tuple[float, float] = (0.3, 0.8)
SESSION_TTL_SECONDS = 60 * 30  # 30 minutes


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    x: PlayerType = Field(default=PlayerType.HUMAN, description="Who plays X")
    o: PlayerType = Field(default=PlayerType.COMPUTER, description="Who plays O")


class MoveRequest(BaseModel):
    """Request payload for a human move on an existing game."""

    row: int = Field(ge=0, le=2, description="Row index, 0 for A")
    col: int = Field(ge=0, le=2, description="Column index, 0 for 1")


def _cleanup_sessions() -> None:
    """Drop sessions nobody has touched within the TTL."""

    now = time.time()
    expired = [
        session_id
        for session_id, session in list(SESSIONS.items())
        if not session.ai_pending and now - session.last_active >= SESSION_TTL_SECONDS
    ]
    for session_id in expired:
        SESSIONS.pop(session_id, None)
    if expired:
        logger.info("Expired %d idle game(s)", len(expired))


def _create_session(players: PlayerSet) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    _cleanup_sessions()
    session = GameSession(players=players, game=new_game(players))
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Created game %s (X: %s, O: %s)",
        session_id,
        players.x.kind.value,
        players.o.kind.value,
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        session = SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc
    session.last_active = time.time()
    return session


def _record(session: GameSession, player: Player, before: Board) -> None:
    """Log the cell ``player`` filled going from ``before`` to the current board."""
    after = board_of(session.game)
    if after is None:
        return
    for pos in before.empty_cells():
        if after[pos] is not Cell.EMPTY:
            row, col = pos
            session.move_log.append(
                {
                    "player": str(player),
                    "row": row,
                    "col": col,
                    "label": position_label(pos),
                }
            )
            return


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    # Computer against computer keeps going until the game ends.
    while True:
        time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

        with session.lock:
            session.ai_pending = False
            player = session.computer_to_move
            if player is None:
                return
            before = session.game
            session.game = MinimaxAI(player).play(before)
            _record(session, player, before.board)
            session.last_active = time.time()
            logger.info("Game %s: computer %s moved", game_id, player)
            session.ai_pending = session.computer_to_move is not None
            if not session.ai_pending:
                return


def _status(game: Game) -> str:
    if isinstance(game, InPlay):
        return "in_play"
    if isinstance(game, Tie):
        return "tie"
    if isinstance(game, Win):
        return "win"
    if isinstance(game, Uninitiated):
        return "uninitiated"
    raise TypeError(f"Unknown game state: {game!r}")


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        board = board_of(game)
        players = session.players

        state: Dict[str, object] = {
            "id": game_id,
            "status": _status(game),
            "board": board.to_string().split("\n") if board is not None else None,
            "currentPlayer": str(game.turn) if isinstance(game, InPlay) else None,
            "winner": str(game.winner) if isinstance(game, Win) else None,
            "players": {"X": players.x.kind.value, "O": players.o.kind.value},
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    row: int,
    col: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if isinstance(game, (Tie, Win)):
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(
                status_code=400, detail="Computer is completing its move"
            )

        if not isinstance(game, InPlay) or game.turn.is_computer:
            raise HTTPException(
                status_code=400, detail="It is not a human player's turn"
            )

        player = game.turn
        try:
            session.game = step(game, (row, col))
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        _record(session, player, game.board)
        session.last_active = time.time()
        logger.info(
            "Game %s: %s played %s", game_id, player, position_label((row, col))
        )

        should_schedule_ai = session.computer_to_move is not None
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(
    request: NewGameRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    game_id, session = _create_session(PlayerSet.of(request.x, request.o))
    if session.computer_to_move is not None:
        session.ai_pending = True
        background_tasks.add_task(_run_ai_turn, game_id)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.row, request.col, background_tasks)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <style>
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: flex-start;
        padding: 2rem 1rem;
        font-family: system-ui, -apple-system, \"Segoe UI\", sans-serif;
        background: #eef1fb;
        color: #13203a;
      }
      main {
        background: #fff;
        border-radius: 16px;
        padding: 1.5rem 2rem;
        box-shadow: 0 12px 32px rgba(19, 32, 58, 0.12);
      }
      .controls {
        display: flex;
        gap: 0.75rem;
        align-items: center;
        margin-bottom: 1rem;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 5rem);
        gap: 6px;
      }
      .cell {
        width: 5rem;
        height: 5rem;
        font-size: 2.5rem;
        font-weight: 600;
        border: none;
        border-radius: 10px;
        background: #dbe0ff;
        cursor: pointer;
      }
      .cell:disabled {
        cursor: default;
      }
      #status {
        margin-top: 1rem;
        min-height: 1.5rem;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic Tac Toe</h1>
      <div class=\"controls\">
        <label>X <select id=\"x\"><option value=\"human\">Human</option><option value=\"computer\">Computer</option></select></label>
        <label>O <select id=\"o\"><option value=\"computer\">Computer</option><option value=\"human\">Human</option></select></label>
        <button id=\"new-game\">New game</button>
      </div>
      <div class=\"board\" id=\"board\"></div>
      <div id=\"status\"></div>
    </main>
    <script>
      let state = null;
      const boardEl = document.getElementById(\"board\");
      const statusEl = document.getElementById(\"status\");

      function render() {
        boardEl.innerHTML = \"\";
        if (!state || !state.board) return;
        state.board.forEach((line, row) => {
          [...line].forEach((mark, col) => {
            const cell = document.createElement(\"button\");
            cell.className = \"cell\";
            cell.textContent = mark === \"-\" ? \"\" : mark;
            const humanTurn = state.status === \"in_play\" && !state.aiPending &&
              state.players[state.currentPlayer] === \"human\";
            cell.disabled = mark !== \"-\" || !humanTurn;
            cell.addEventListener(\"click\", () => play(row, col));
            boardEl.appendChild(cell);
          });
        });
        if (state.status === \"win\") statusEl.textContent = state.winner + \" wins!\";
        else if (state.status === \"tie\") statusEl.textContent = \"Game is tied\";
        else if (state.aiPending) statusEl.textContent = \"Computer is thinking...\";
        else statusEl.textContent = state.currentPlayer + \" to move\";
      }

      async function refresh() {
        const response = await fetch(`/api/game/${state.id}`);
        state = await response.json();
        render();
        if (state.aiPending) setTimeout(refresh, 300);
      }

      async function newGame() {
        const body = {
          x: document.getElementById(\"x\").value,
          o: document.getElementById(\"o\").value,
        };
        const response = await fetch(\"/api/game\", {
          method: \"POST\",
          headers: {\"Content-Type\": \"application/json\"},
          body: JSON.stringify(body),
        });
        state = await response.json();
        render();
        if (state.aiPending) setTimeout(refresh, 300);
      }

      async function play(row, col) {
        const response = await fetch(`/api/game/${state.id}/move`, {
          method: \"POST\",
          headers: {\"Content-Type\": \"application/json\"},
          body: JSON.stringify({row, col}),
        });
        const payload = await response.json();
        if (!response.ok) {
          statusEl.textContent = payload.detail;
          return;
        }
        state = payload;
        render();
        if (state.aiPending) setTimeout(refresh, 300);
      }

      document.getElementById(\"new-game\").addEventListener(\"click\", newGame);
      newGame();
    </script>
  </body>
</html>
"""
