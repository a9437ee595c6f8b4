"""Simulation engine for the dungeon crowd simulation."""

import logging
import numpy as np
from typing import List, Dict, Optional, TYPE_CHECKING

from .grid import Grid
from .agent import Agent
from .render import Drawable, build_render_feed
from .state import SimulationState, AgentSnapshot
from .tile import TileKind

if TYPE_CHECKING:
    from ..config import SimulationConfig

logger = logging.getLogger(__name__)


class SimulationEngine:
    """
    Orchestrates the discrete-time simulation loop.

    Implements:
    1. Grid creation and wall generation
    2. Agent spawning
    3. Sequential per-tick update in spawn order
    4. State snapshot generation

    Agents are advanced one after another against the live grid, so an agent
    sees every move made earlier in the same tick. Spawn order is therefore
    also movement priority.
    """

    def __init__(self, config: "SimulationConfig",
                 grid: Optional[Grid] = None,
                 agents: Optional[List[Agent]] = None):
        self.config = config
        self.current_step = 0
        self.rng = np.random.default_rng(config.seed)

        # Initialize grid
        if grid is None:
            grid = Grid(config.grid.size, config.grid.max_empty_attempts)
            grid.generate_walls(config.grid.num_walls,
                                config.grid.wall_growth_prob, self.rng)
        self.grid = grid

        # Initialize agents
        if agents is None:
            agents = self._spawn_agents(config.agents.count)
        self.agents: List[Agent] = agents

        # Metrics tracking
        self.total_moves = 0
        self.total_stalls = 0

    def _spawn_agents(self, count: int) -> List[Agent]:
        """Create agents at random empty cells, ids starting at 1."""
        return [
            Agent.spawn(self.grid, self.rng, agent_id, self.config.agents.alpha)
            for agent_id in range(1, count + 1)
        ]

    def step(self) -> SimulationState:
        """
        Execute one tick.

        Every agent advances once, in spawn order. Returns a snapshot of the
        settled state.
        """
        self.current_step += 1
        moved = 0
        stalled = 0
        for agent in self.agents:
            if agent.advance(self.grid, self.rng,
                             retry_limit=self.config.agents.retry_limit,
                             reset_stall_on_retarget=self.config.agents.reset_stall_on_retarget):
                moved += 1
            else:
                stalled += 1

        self.total_moves += moved
        self.total_stalls += stalled
        logger.debug("Tick %d: %d moved, %d stalled",
                     self.current_step, moved, stalled)
        return self._create_state_snapshot(moved, stalled)

    def run(self, steps: int) -> SimulationState:
        """Run `steps` ticks and return the last snapshot."""
        if steps <= 0:
            raise ValueError(f"steps must be positive, got {steps}")
        state = None
        for _ in range(steps):
            state = self.step()
        return state

    def _create_state_snapshot(self, moved: int, stalled: int) -> SimulationState:
        """Create snapshot of current simulation state."""
        agent_snapshots = [
            AgentSnapshot(
                agent_id=a.id,
                x=a.location[0],
                y=a.location[1],
                dest_x=a.destination[0],
                dest_y=a.destination[1],
                stalled_ticks=a.stalled_ticks,
                state=a.state.value
            )
            for a in self.agents
        ]

        total_cells = self.grid.size * self.grid.size
        metrics = {
            'moved': moved,
            'stalled': stalled,
            'arrivals': sum(a.arrivals for a in self.agents),
            'retargets': sum(a.retargets for a in self.agents),
            'occupied_cells': self.grid.count(TileKind.OCCUPIED),
            'wall_fraction': self.grid.count(TileKind.WALL) / total_cells
        }

        return SimulationState(
            step=self.current_step,
            agents=agent_snapshots,
            tiles=self.grid.snapshot(),
            metrics=metrics
        )

    def render_feed(self) -> List[Drawable]:
        """Drawables for the current settled state."""
        colors = self.config.colors
        return build_render_feed(self.grid, self.agents, self.config.grid.cell_scale,
                                 colors.wall, colors.wall_shadow)

    def is_finished(self) -> bool:
        """Check if simulation should terminate."""
        return 0 < self.config.max_steps <= self.current_step

    def get_summary(self) -> Dict:
        """Get summary statistics for the simulation."""
        return {
            'total_steps': self.current_step,
            'agents_total': len(self.agents),
            'total_moves': self.total_moves,
            'total_stalls': self.total_stalls,
            'arrivals': sum(a.arrivals for a in self.agents),
            'retargets': sum(a.retargets for a in self.agents),
            'moves_per_step': self.total_moves / max(1, self.current_step)
        }
