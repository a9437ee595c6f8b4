"""Agent that walks toward its destination one A* step per tick."""

import logging
from enum import Enum
from typing import Optional

import numpy as np

from .grid import Coord, Grid
from .pathfinding import find_next_step
from .tile import Color, EMPTY, OCCUPIED, Tile

logger = logging.getLogger(__name__)

DEFAULT_RETRY_LIMIT = 10
DEFAULT_ALPHA = 0.9


class AgentState(Enum):
    """Outcome of an agent's most recent advance."""
    IDLE = "idle"
    MOVING = "moving"
    STALLED = "stalled"
    ARRIVED = "arrived"


def random_color(rng: np.random.Generator, alpha: float = DEFAULT_ALPHA) -> Color:
    r, g, b = rng.random(3)
    return (float(r), float(g), float(b), float(alpha))


class Agent:
    """
    Mobile entity with a location and an assigned destination.

    The agent claims two grid cells: its location (Occupied) and its
    destination (Destination carrying the agent's color). Nothing on the
    grid points back at the agent; the stored coordinates are the only link.
    """

    def __init__(self, agent_id: int, location: Coord, destination: Coord,
                 appearance: Color):
        self.id = agent_id
        self.location = location
        self.destination = destination
        self.appearance = appearance
        self.stalled_ticks = 0
        self.state = AgentState.IDLE

        self.steps_taken = 0
        self.arrivals = 0
        self.retargets = 0

    @classmethod
    def place(cls, grid: Grid, agent_id: int, location: Coord,
              destination: Coord, appearance: Color) -> "Agent":
        """Create an agent at explicit cells and claim them on the grid."""
        if tuple(location) == tuple(destination):
            raise ValueError(
                f"Agent {agent_id} location and destination must differ, got {location}")
        grid.set(location, OCCUPIED)
        grid.set(destination, Tile.destination(appearance))
        return cls(agent_id, location, destination, appearance)

    @classmethod
    def spawn(cls, grid: Grid, rng: np.random.Generator, agent_id: int,
              alpha: float = DEFAULT_ALPHA) -> "Agent":
        """Create an agent at a random empty cell with a random empty destination."""
        location = grid.find_empty(rng)
        grid.set(location, OCCUPIED)
        destination = grid.find_empty(rng)
        appearance = random_color(rng, alpha)
        grid.set(destination, Tile.destination(appearance))
        return cls(agent_id, location, destination, appearance)

    def retarget(self, grid: Grid, rng: np.random.Generator,
                 reset_stall: bool = False) -> None:
        """
        Release the current destination and claim a new random one.

        The stall counter is kept unless reset_stall is set, so an agent
        retargeted after repeated failures retargets again on its next
        failure.
        """
        if self.destination != self.location:
            grid.set(self.destination, EMPTY)
        old = self.destination
        self.destination = grid.find_empty(rng)
        grid.set(self.destination, Tile.destination(self.appearance))
        self.retargets += 1
        if reset_stall:
            self.stalled_ticks = 0
        logger.debug("Agent %d retargeted %s -> %s", self.id, old, self.destination)

    def advance(self, grid: Grid, rng: np.random.Generator,
                retry_limit: int = DEFAULT_RETRY_LIMIT,
                reset_stall_on_retarget: bool = False) -> bool:
        """
        Move one cell along a shortest path to the destination.

        Returns True if the agent moved. An agent that reaches its
        destination is given a new one straight away; the cell it stands on
        stays Occupied.
        """
        step: Optional[Coord] = find_next_step(self.location, self.destination, grid)

        if step is None:
            if self.stalled_ticks > retry_limit:
                self.retarget(grid, rng, reset_stall=reset_stall_on_retarget)
            self.stalled_ticks += 1
            self.state = AgentState.STALLED
            return False

        grid.set(self.location, EMPTY)
        self.location = step
        grid.set(self.location, OCCUPIED)
        self.stalled_ticks = 0
        self.steps_taken += 1
        self.state = AgentState.MOVING

        if self.location == self.destination:
            self.arrivals += 1
            self.state = AgentState.ARRIVED
            self.retarget(grid, rng)
        return True

    def __repr__(self) -> str:
        return (f"Agent(id={self.id}, loc={self.location}, "
                f"dest={self.destination}, state={self.state.value})")
