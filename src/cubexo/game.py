"""Core rules for CubeXO (3x3x3 tic-tac-toe played over three layers)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .lines import (
    BOARD_CELLS,
    EMPTY,
    LAYER_CELLS,
    SIZE,
    Line,
    check_cross_layer_winner,
    check_layer_winner,
    layer_of,
)

logger = logging.getLogger(__name__)

Player = str  # "X" or "O"

LAYERS_TO_WIN = 2


class InvalidMove(ValueError):
    """Raised when a move targets a cell that cannot be played right now."""


def other_player(player: Player) -> Player:
    return "O" if player == "X" else "X"


@dataclass
class LayerOutcome:
    # Set at most once per game; a layer with a winner is frozen
    winner: Optional[Player] = None
    line: Optional[Line] = None


def is_eligible(
    board: Sequence[str], layer_outcomes: Sequence[LayerOutcome], index: int
) -> bool:
    """True if ``index`` is an empty cell in a layer nobody has won yet."""
    if not 0 <= index < BOARD_CELLS:
        return False
    if board[index] != EMPTY:
        return False
    return layer_outcomes[layer_of(index)].winner is None


# ---------- Game ----------


@dataclass
class CubeXOGame:
    cells: List[str] = field(default_factory=lambda: [EMPTY] * BOARD_CELLS)
    layers: List[LayerOutcome] = field(
        default_factory=lambda: [LayerOutcome() for _ in range(SIZE)]
    )
    current_player: Player = "X"
    winner: Optional[Player] = None
    # Only set for an instant cross-layer win; a 2-layer match win has no line
    winning_line: Optional[Line] = None
    drawn: bool = False
    last_move: Optional[int] = None

    # ---- API used by the session layer & AI ----

    def apply_move(self, index: int) -> None:
        """Place the current player's mark at ``index`` and settle the outcome.

        Order of evaluation after the mark is placed:

        1. any cross-layer line ends the match immediately;
        2. otherwise the affected layer may be won (and frozen);
        3. two won layers end the match;
        4. a full board is a draw;
        5. otherwise the turn passes.

        Raises ``InvalidMove`` without touching any state if the index is out
        of range, the cell is taken, its layer is frozen, or the game is over.
        """
        self._validate(index)

        player = self.current_player
        z = layer_of(index)
        self.cells[index] = player
        self.last_move = index
        logger.debug("%s plays %d (layer %d)", player, index, z)

        winner, line = check_cross_layer_winner(self.cells)
        if winner is not None:
            self.winner = winner
            self.winning_line = line
            logger.debug("%s wins across layers on %s", winner, line)
            return

        winner, line = check_layer_winner(self.cells, z)
        if winner is not None:
            self.layers[z] = LayerOutcome(winner=winner, line=line)
            logger.debug("%s takes layer %d on %s", winner, z, line)

        x_layers, o_layers = self.score()
        if x_layers >= LAYERS_TO_WIN or o_layers >= LAYERS_TO_WIN:
            self.winner = "X" if x_layers >= LAYERS_TO_WIN else "O"
            logger.debug("%s wins the match on layers", self.winner)
        elif EMPTY not in self.cells:
            self.drawn = True
            logger.debug("Board full, game drawn")
        else:
            self.current_player = other_player(player)

    def reset(self) -> None:
        fresh = CubeXOGame()
        self.cells = fresh.cells
        self.layers = fresh.layers
        self.current_player = fresh.current_player
        self.winner = None
        self.winning_line = None
        self.drawn = False
        self.last_move = None

    def available_moves(self) -> List[int]:
        if self.is_terminal():
            return []
        return [
            i for i in range(BOARD_CELLS) if is_eligible(self.cells, self.layers, i)
        ]

    def board_view(self) -> Tuple[str, ...]:
        return tuple(self.cells)

    def winner_at(self, z: int) -> Optional[Player]:
        return self.layers[z].winner

    def is_layer_full(self, z: int) -> bool:
        offset = z * LAYER_CELLS
        return EMPTY not in self.cells[offset : offset + LAYER_CELLS]

    def is_terminal(self) -> bool:
        return self.winner is not None or self.drawn

    def score(self) -> Tuple[int, int]:
        """Number of layers won by X and by O."""
        x = sum(1 for layer in self.layers if layer.winner == "X")
        o = sum(1 for layer in self.layers if layer.winner == "O")
        return x, o

    def clone(self) -> "CubeXOGame":
        return CubeXOGame(
            cells=self.cells.copy(),
            layers=[LayerOutcome(o.winner, o.line) for o in self.layers],
            current_player=self.current_player,
            winner=self.winner,
            winning_line=self.winning_line,
            drawn=self.drawn,
            last_move=self.last_move,
        )

    # ---- helpers ----

    def _validate(self, index: int) -> None:
        reason = self._rejection(index)
        if reason is not None:
            logger.debug("Rejected move %r: %s", index, reason)
            raise InvalidMove(reason)

    def _rejection(self, index: int) -> Optional[str]:
        if self.is_terminal():
            return "Game already finished"
        # bool is an int subclass but never a cell index
        if (
            isinstance(index, bool)
            or not isinstance(index, int)
            or not 0 <= index < BOARD_CELLS
        ):
            return f"Cell index {index!r} is out of range"
        if self.cells[index] != EMPTY:
            return "Cell already occupied"
        if self.layers[layer_of(index)].winner is not None:
            return "Layer already won"
        return None
