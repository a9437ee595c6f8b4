"""State snapshot dataclasses for the dungeon crowd simulation."""

from dataclasses import dataclass
from typing import List, Dict
import numpy as np


@dataclass(frozen=True)
class AgentSnapshot:
    """Immutable snapshot of an agent's state at a given tick."""
    agent_id: int
    x: int
    y: int
    dest_x: int
    dest_y: int
    stalled_ticks: int
    state: str  # "idle", "moving", "stalled", "arrived"


@dataclass
class SimulationState:
    """Complete snapshot of simulation state after a tick has settled."""
    step: int
    agents: List[AgentSnapshot]
    tiles: np.ndarray           # Copy of the tile kind layer, [y, x]
    metrics: Dict[str, float]   # moved, stalled, arrivals, retargets, ...

    def to_csv_rows(self) -> List[Dict]:
        """Convert to CSV-compatible format."""
        return [
            {
                "step": self.step,
                "agent_id": a.agent_id,
                "x": a.x,
                "y": a.y,
                "dest_x": a.dest_x,
                "dest_y": a.dest_y,
                "stalled_ticks": a.stalled_ticks,
                "state": a.state
            }
            for a in self.agents
        ]
