"""Tile variants for grid cells."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

Color = Tuple[float, float, float, float]


class TileKind(IntEnum):
    """Cell state stored in the grid's kind layer."""
    EMPTY = 0
    WALL = 1
    OCCUPIED = 2
    DESTINATION = 3


@dataclass(frozen=True)
class Tile:
    """
    State of one grid cell.

    Only DESTINATION tiles carry a color (the owning agent's appearance).
    Tiles hold no agent id: ownership is implied by the agent's own
    location/destination coordinates.
    """
    kind: TileKind
    color: Optional[Color] = None

    @staticmethod
    def destination(color: Color) -> "Tile":
        return Tile(TileKind.DESTINATION, tuple(float(c) for c in color))

    def __repr__(self) -> str:
        if self.kind == TileKind.DESTINATION:
            return f"Tile(DESTINATION, color={self.color})"
        return f"Tile({self.kind.name})"


EMPTY = Tile(TileKind.EMPTY)
WALL = Tile(TileKind.WALL)
OCCUPIED = Tile(TileKind.OCCUPIED)
