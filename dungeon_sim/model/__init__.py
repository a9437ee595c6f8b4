"""Model package for the dungeon crowd simulation."""

from .tile import Tile, TileKind, EMPTY, WALL, OCCUPIED
from .state import AgentSnapshot, SimulationState
from .grid import Grid
from .pathfinding import find_next_step, manhattan, shortest_path_length
from .agent import Agent, AgentState
from .render import Drawable, build_render_feed
from .engine import SimulationEngine

__all__ = [
    'Tile',
    'TileKind',
    'EMPTY',
    'WALL',
    'OCCUPIED',
    'AgentSnapshot',
    'SimulationState',
    'Grid',
    'find_next_step',
    'manhattan',
    'shortest_path_length',
    'Agent',
    'AgentState',
    'Drawable',
    'build_render_feed',
    'SimulationEngine',
]
