"""Rule-priority opponent for CubeXO.

The opponent does not search. It walks a fixed cascade and plays the first
move that any step produces:

1. complete a cross-layer line (instant match win);
2. block the human's cross-layer line;
3. with one layer already won, complete a line in an open layer;
4. with the human holding one layer, block their line in an open layer;
5. complete a line in any open layer;
6. block the human's line in any open layer;
7. take the cube center, then a layer center, then a random corner, then
   any random playable cell.

Lines are scanned in catalog order and open layers in ascending order, so
only step 7 involves chance. Pass a seeded ``random.Random`` to make it
repeatable.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from .game import CubeXOGame, LayerOutcome, Player, is_eligible, other_player
from .lines import BOARD_CELLS, CROSS_LAYER_LINES, EMPTY, LAYER_LINES, Line

logger = logging.getLogger(__name__)

CUBE_CENTER = 13
LAYER_CENTERS = (4, 22)
CUBE_CORNERS = (0, 2, 6, 8, 18, 20, 24, 26)


def _completing_cell(
    board: Sequence[str],
    layer_outcomes: Sequence[LayerOutcome],
    lines: Iterable[Line],
    player: Player,
) -> Optional[int]:
    """First playable cell that would give ``player`` three in a line."""
    for line in lines:
        trio = [board[i] for i in line]
        if trio.count(player) == 2 and trio.count(EMPTY) == 1:
            for i in line:
                if is_eligible(board, layer_outcomes, i):
                    return i
    return None


def _completing_cell_in_layers(
    board: Sequence[str],
    layer_outcomes: Sequence[LayerOutcome],
    layers: Iterable[int],
    player: Player,
) -> Optional[int]:
    for z in layers:
        move = _completing_cell(board, layer_outcomes, LAYER_LINES[z], player)
        if move is not None:
            return move
    return None


def choose_move(
    board: Sequence[str],
    layer_outcomes: Sequence[LayerOutcome],
    rng: Optional[random.Random] = None,
    player: Player = "O",
) -> Optional[int]:
    """Pick a cell for ``player``; ``None`` when nothing is playable.

    Neither ``board`` nor ``layer_outcomes`` is modified.
    """
    rng = rng or random.Random()
    me: Player = player
    opp: Player = other_player(me)

    # 1) / 2) Cross-layer: win, then block
    move = _completing_cell(board, layer_outcomes, CROSS_LAYER_LINES, me)
    if move is not None:
        logger.debug("%s wins across layers at %d", me, move)
        return move
    move = _completing_cell(board, layer_outcomes, CROSS_LAYER_LINES, opp)
    if move is not None:
        logger.debug("%s blocks a cross-layer line at %d", me, move)
        return move

    open_layers = [z for z, o in enumerate(layer_outcomes) if o.winner is None]
    my_layers = sum(1 for o in layer_outcomes if o.winner == me)
    opp_layers = sum(1 for o in layer_outcomes if o.winner == opp)

    # 3) / 4) A second layer decides the match
    if my_layers >= 1:
        move = _completing_cell_in_layers(board, layer_outcomes, open_layers, me)
        if move is not None:
            logger.debug("%s closes the match at %d", me, move)
            return move
    if opp_layers >= 1:
        move = _completing_cell_in_layers(board, layer_outcomes, open_layers, opp)
        if move is not None:
            logger.debug("%s blocks the match at %d", me, move)
            return move

    # 5) / 6) Any layer
    move = _completing_cell_in_layers(board, layer_outcomes, open_layers, me)
    if move is not None:
        logger.debug("%s takes a layer at %d", me, move)
        return move
    move = _completing_cell_in_layers(board, layer_outcomes, open_layers, opp)
    if move is not None:
        logger.debug("%s blocks a layer at %d", me, move)
        return move

    # 7) Geometry: cube center > layer centers > corners > anything
    if is_eligible(board, layer_outcomes, CUBE_CENTER):
        return CUBE_CENTER
    for c in LAYER_CENTERS:
        if is_eligible(board, layer_outcomes, c):
            return c

    corners = [c for c in CUBE_CORNERS if is_eligible(board, layer_outcomes, c)]
    if corners:
        return rng.choice(corners)

    moves = [i for i in range(BOARD_CELLS) if is_eligible(board, layer_outcomes, i)]
    if moves:
        return rng.choice(moves)

    logger.warning("No playable cell left for %s", me)
    return None


@dataclass
class HeuristicAI:
    """AI player backed by ``choose_move``.

    Surface used by the session layer:
      - HeuristicAI(player="O", seed=None)
      - choose(game) -> cell index
    """

    player: Player = "O"
    seed: Optional[int] = None
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def choose(self, game: CubeXOGame) -> int:
        if game.current_player != self.player:
            raise ValueError("It is not this AI player's turn")
        move = choose_move(game.board_view(), tuple(game.layers), self._rng, self.player)
        if move is None:
            raise RuntimeError("No valid moves available")
        return move
