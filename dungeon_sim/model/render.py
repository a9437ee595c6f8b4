"""Render feed: drawable units derived from settled grid and agent state."""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np

from .agent import Agent
from .grid import Grid
from .tile import Color, TileKind


@dataclass(frozen=True)
class Drawable:
    """One shape for the presentation layer, in pixel coordinates."""
    shape: str  # "square" or "circle"
    center: Tuple[float, float]
    size: float
    color: Color


def cell_center(x: int, y: int, scale: int) -> Tuple[float, float]:
    return (x * scale + scale / 2, y * scale + scale / 2)


def build_render_feed(grid: Grid, agents: Iterable[Agent], scale: int,
                      wall_color: Color, wall_shadow: Color) -> List[Drawable]:
    """
    Translate tiles and agents into drawables.

    Walls and destinations become squares; Empty and Occupied tiles are not
    drawn. A wall is opaque when the cell below it (y + 1) is also a wall and
    drawn with the translucent shadow color otherwise; the last row has no
    cell below and always uses the shadow color. Agents become circles in
    their own color, drawn after all tiles.

    Must only be called between ticks.
    """
    feed: List[Drawable] = []
    kinds = grid.kinds
    size = grid.size
    walls_below = np.zeros_like(kinds, dtype=bool)
    walls_below[:-1, :] = kinds[1:, :] == TileKind.WALL

    for y in range(size):
        for x in range(size):
            kind = kinds[y, x]
            if kind == TileKind.WALL:
                color = wall_color if walls_below[y, x] else wall_shadow
            elif kind == TileKind.DESTINATION:
                color = tuple(float(c) for c in grid.colors[y, x])
            else:
                continue
            feed.append(Drawable("square", cell_center(x, y, scale), scale, color))

    for agent in agents:
        feed.append(Drawable("circle", cell_center(*agent.location, scale),
                             scale, agent.appearance))
    return feed
