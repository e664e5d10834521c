from .graph import Graph
from .map import GameMap, MapPhase
from .state import MapState
from .territory import Player, Territory

__all__ = [
    "Graph",
    "GameMap",
    "MapPhase",
    "MapState",
    "Player",
    "Territory",
]
