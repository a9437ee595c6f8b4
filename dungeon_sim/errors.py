"""Exception types for the dungeon crowd simulation."""


class SimulationError(Exception):
    """Base class for errors raised by the simulation model."""


class NoEmptyCellError(SimulationError):
    """Raised when the grid has no Empty cell left to hand out."""


class OutOfBoundsError(SimulationError, IndexError):
    """Raised when a coordinate outside [0, size) reaches the grid."""

    def __init__(self, coord, size: int):
        super().__init__(f"Coordinate {coord} outside grid of size {size}")
        self.coord = coord
        self.size = size
