"""Tile grid for the dungeon crowd simulation."""

import logging
from typing import List, Tuple

import numpy as np

from ..errors import NoEmptyCellError, OutOfBoundsError
from .tile import Tile, TileKind, WALL

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]

DEFAULT_MAX_EMPTY_ATTEMPTS = 10_000


class Grid:
    """
    Fixed-size square matrix of tiles.

    Coordinate convention: (x, y) for API, [y, x] for array indexing.
    Two layers are kept: the tile kind of every cell and the RGBA color of
    Destination cells. Every cell starts out Empty.
    """

    def __init__(self, size: int = 100,
                 max_empty_attempts: int = DEFAULT_MAX_EMPTY_ATTEMPTS):
        if size <= 0:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self.max_empty_attempts = max_empty_attempts
        self.kinds = np.full((size, size), TileKind.EMPTY, dtype=np.int8)
        self.colors = np.zeros((size, size, 4), dtype=np.float64)

    # ------------------------------------------------------------------
    # Coordinate access
    # ------------------------------------------------------------------

    def in_bounds(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.size and 0 <= y < self.size

    def check_bounds(self, coord: Coord) -> None:
        if not self.in_bounds(coord):
            raise OutOfBoundsError(coord, self.size)

    def kind_at(self, coord: Coord) -> TileKind:
        self.check_bounds(coord)
        x, y = coord
        return TileKind(int(self.kinds[y, x]))

    def tile_at(self, coord: Coord) -> Tile:
        """Return the current tile at (x, y)."""
        kind = self.kind_at(coord)
        if kind == TileKind.DESTINATION:
            x, y = coord
            return Tile.destination(tuple(self.colors[y, x]))
        return Tile(kind)

    def set(self, coord: Coord, tile: Tile) -> None:
        """
        Overwrite the tile at (x, y).

        No check is made that the transition is legal; callers keep the
        agent/grid relationship consistent.
        """
        self.check_bounds(coord)
        x, y = coord
        self.kinds[y, x] = tile.kind
        if tile.kind == TileKind.DESTINATION:
            self.colors[y, x] = tile.color
        else:
            self.colors[y, x] = 0.0

    def neighbors(self, coord: Coord) -> List[Coord]:
        """In-bounds von Neumann neighbors of a cell, in right/left/down/up order."""
        x, y = coord
        candidates = [(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)]
        return [c for c in candidates if self.in_bounds(c)]

    # ------------------------------------------------------------------
    # Aggregate queries
    # ------------------------------------------------------------------

    def count(self, kind: TileKind) -> int:
        return int(np.count_nonzero(self.kinds == kind))

    def wall_mask(self) -> np.ndarray:
        """Boolean [y, x] mask of wall cells."""
        return self.kinds == TileKind.WALL

    def snapshot(self) -> np.ndarray:
        """Copy of the tile kind layer."""
        return self.kinds.copy()

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def find_empty(self, rng: np.random.Generator) -> Coord:
        """
        Return a uniformly sampled Empty cell.

        Draws random coordinates and rejects non-empty ones. After
        max_empty_attempts rejections the remaining Empty cells are
        enumerated and one is picked directly, so a nearly full grid still
        samples uniformly and a full grid fails instead of spinning.
        """
        for _ in range(self.max_empty_attempts):
            x = int(rng.integers(0, self.size))
            y = int(rng.integers(0, self.size))
            if self.kinds[y, x] == TileKind.EMPTY:
                return (x, y)

        ys, xs = np.nonzero(self.kinds == TileKind.EMPTY)
        if len(xs) == 0:
            raise NoEmptyCellError(
                f"No empty cell left on {self.size}x{self.size} grid")
        logger.debug("Rejection sampling exhausted after %d attempts, "
                     "scanning %d empty cells", self.max_empty_attempts, len(xs))
        i = int(rng.integers(0, len(xs)))
        return (int(xs[i]), int(ys[i]))

    # ------------------------------------------------------------------
    # Wall generation
    # ------------------------------------------------------------------

    def seed_walls(self, count: int, rng: np.random.Generator) -> List[Coord]:
        """Place `count` walls at independently drawn empty cells."""
        seeded = []
        for _ in range(count):
            coord = self.find_empty(rng)
            self.set(coord, WALL)
            seeded.append(coord)
        return seeded

    def grow_walls(self, growth_prob: float, rng: np.random.Generator) -> int:
        """
        Grow wall clusters in a single sweep over interior cells.

        Each Empty interior cell becomes a wall with probability
        `n * growth_prob`, n being the number of orthogonal wall neighbors.
        The sweep reads the partially updated grid, so walls created earlier
        in the pass feed later cells. Returns the number of walls added.
        """
        walls = self.kinds  # updated in place as the sweep advances
        added = 0
        for x in range(1, self.size - 1):
            for y in range(1, self.size - 1):
                if walls[y, x] != TileKind.EMPTY:
                    continue
                n = (int(walls[y, x - 1] == TileKind.WALL)
                     + int(walls[y, x + 1] == TileKind.WALL)
                     + int(walls[y - 1, x] == TileKind.WALL)
                     + int(walls[y + 1, x] == TileKind.WALL))
                if n and rng.random() < n * growth_prob:
                    walls[y, x] = TileKind.WALL
                    added += 1
        return added

    def generate_walls(self, count: int, growth_prob: float,
                       rng: np.random.Generator) -> None:
        """Seed then grow walls. Called once, before any agent is placed."""
        seeded = self.seed_walls(count, rng)
        added = self.grow_walls(growth_prob, rng)
        logger.debug("Generated walls: %d seeded, %d grown", len(seeded), added)

    def __repr__(self) -> str:
        return (f"Grid(size={self.size}, walls={self.count(TileKind.WALL)}, "
                f"occupied={self.count(TileKind.OCCUPIED)})")
