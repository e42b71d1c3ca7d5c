"""FastAPI session service that drives CubeXO games for a browser front end."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from pydantic import BaseModel, Field

from .ai import HeuristicAI
from .game import CubeXOGame, InvalidMove
from .lines import BOARD_CELLS, CROSS_LAYER_LINES, EMPTY, LAYER_LINES, SIZE

logger = logging.getLogger(__name__)

GameMode = Literal["pvp", "pve"]


@dataclass
class GameSession:
    """Container for an active CubeXO game and, in PVE, its AI opponent."""

    game: CubeXOGame
    mode: GameMode
    ai: Optional[HeuristicAI]
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="CubeXO", description="3x3x3 tic-tac-toe over three layers")


# Cosmetic pause before the AI answers, in seconds
AI_THINK_DELAY: Tuple[float, float] = (0.5, 1.0)


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    mode: GameMode = Field(default="pve", description="pvp or pve")
    seed: Optional[int] = Field(
        default=None, description="Seed for the AI's random fallback moves"
    )


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    index: int = Field(ge=0, le=BOARD_CELLS - 1)


def _create_session(mode: GameMode, seed: Optional[int]) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    ai = HeuristicAI(player="O", seed=seed) if mode == "pve" else None
    session = GameSession(game=CubeXOGame(), mode=mode, ai=ai)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created %s game %s", mode, session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            if not session.ai or not session.ai_pending:
                return
            game = session.game
            if game.is_terminal():
                return
            if game.current_player != session.ai.player:
                return
            try:
                index = session.ai.choose(game)
            except RuntimeError:
                logger.warning("AI found no move in game %s", game_id)
                return
            game.apply_move(index)
            session.move_log.append({"player": session.ai.player, "index": index})
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        layers: List[Dict[str, object]] = []
        for z, outcome in enumerate(game.layers):
            layers.append(
                {
                    "index": z,
                    "winner": outcome.winner,
                    "line": list(outcome.line) if outcome.line else None,
                    "full": game.is_layer_full(z),
                }
            )
        x_layers, o_layers = game.score()

        state: Dict[str, object] = {
            "id": game_id,
            "mode": session.mode,
            "board": [c if c != EMPTY else "" for c in game.cells],
            "layers": layers,
            "currentPlayer": game.current_player,
            "winner": game.winner,
            "winningLine": list(game.winning_line) if game.winning_line else None,
            "drawn": game.drawn,
            "score": {"X": x_layers, "O": o_layers},
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")
        if session.ai and game.current_player == session.ai.player:
            raise HTTPException(status_code=400, detail="Not your turn")

        player = game.current_player
        try:
            game.apply_move(index)
        except InvalidMove as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": player, "index": index})

        should_schedule_ai = (
            session.ai is not None
            and not game.is_terminal()
            and game.current_player == session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode, request.seed)
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
    _apply_player_move(game_id, session, request.index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.game.reset()
        session.move_log.clear()
        # A queued AI turn sees this and stands down
        session.ai_pending = False
    logger.info("Reset game %s", game_id)
    return _serialize_session(game_id, session)


@app.delete("/api/game/{game_id}")
def delete_game(game_id: str) -> Dict[str, str]:
    _get_session(game_id)
    SESSIONS.pop(game_id, None)
    logger.info("Closed game %s", game_id)
    return {"id": game_id, "status": "closed"}


@app.get("/api/lines")
def get_lines() -> Dict[str, object]:
    """Winning-line catalog so a renderer can highlight by index."""
    return {
        "layers": [[list(line) for line in LAYER_LINES[z]] for z in range(SIZE)],
        "crossLayer": [list(line) for line in CROSS_LAYER_LINES],
    }
