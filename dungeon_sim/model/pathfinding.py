"""A* search returning only the next step toward a goal."""

import heapq
from typing import Dict, Optional

import numpy as np

from .grid import Coord, Grid
from .tile import TileKind


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _passable(grid: Grid, coord: Coord, goal: Coord) -> bool:
    # Empty cells, plus the searcher's own destination marker
    x, y = coord
    kind = grid.kinds[y, x]
    if kind == TileKind.EMPTY:
        return True
    return kind == TileKind.DESTINATION and coord == goal


def find_next_step(start: Coord, goal: Coord, grid: Grid) -> Optional[Coord]:
    """
    Run A* from start to goal on the current grid.

    Uses a 4-connected neighborhood with the Manhattan heuristic. Only the
    first step of a shortest path is returned, since occupancy changes
    before the agent could take a second one. Returns None when no path
    exists, or when start already equals goal.

    Among frontier cells with equal f-score the lexicographically smallest
    (x, y) is expanded first, which makes results reproducible.
    """
    grid.check_bounds(start)
    grid.check_bounds(goal)
    if start == goal:
        return None

    g_score = np.full((grid.size, grid.size), np.inf)
    g_score[start[1], start[0]] = 0
    came_from: Dict[Coord, Coord] = {}

    open_heap = [(manhattan(start, goal), start)]
    f_score: Dict[Coord, float] = {start: manhattan(start, goal)}
    closed = set()

    while open_heap:
        f, current = heapq.heappop(open_heap)
        if current in closed or f > f_score.get(current, np.inf):
            continue  # stale entry

        if current == goal:
            # Walk parents back until the cell adjacent to start
            while came_from[current] != start:
                current = came_from[current]
            return current

        closed.add(current)
        tentative = g_score[current[1], current[0]] + 1
        for nbr in grid.neighbors(current):
            if not _passable(grid, nbr, goal):
                continue
            nx, ny = nbr
            if tentative < g_score[ny, nx]:
                came_from[nbr] = current
                g_score[ny, nx] = tentative
                f_nbr = tentative + manhattan(nbr, goal)
                f_score[nbr] = f_nbr
                heapq.heappush(open_heap, (f_nbr, nbr))

    return None


def shortest_path_length(start: Coord, goal: Coord, grid: Grid) -> Optional[int]:
    """
    Length of the shortest admissible path, or None if unreachable.

    Breadth-first variant of the same admissibility rule; used by reports
    and tests as an oracle for find_next_step.
    """
    if start == goal:
        return 0
    frontier = [start]
    seen = {start}
    depth = 0
    while frontier:
        depth += 1
        nxt = []
        for cell in frontier:
            for nbr in grid.neighbors(cell):
                if nbr in seen or not _passable(grid, nbr, goal):
                    continue
                if nbr == goal:
                    return depth
                seen.add(nbr)
                nxt.append(nbr)
        frontier = nxt
    return None
