"""CubeXO package exposing the line catalog, game rules, AI opponent, and web API."""

from .ai import HeuristicAI, choose_move
from .api import app
from .game import CubeXOGame, InvalidMove, LayerOutcome
from .lines import CROSS_LAYER_LINES, LAYER_LINES

__all__ = [
    "CROSS_LAYER_LINES",
    "CubeXOGame",
    "HeuristicAI",
    "InvalidMove",
    "LAYER_LINES",
    "LayerOutcome",
    "app",
    "choose_move",
]
