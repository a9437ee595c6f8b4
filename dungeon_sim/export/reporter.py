"""Summary report generation for the dungeon crowd simulation."""

from typing import List, Dict, Optional, TYPE_CHECKING
from pathlib import Path

import numpy as np
from scipy.ndimage import label

from ..model.tile import TileKind

if TYPE_CHECKING:
    from ..model.state import SimulationState


def layout_stats(tiles: np.ndarray) -> Dict[str, float]:
    """
    Wall structure of a tile kind layer.

    Uses 4-connected component labelling: wall clusters are connected wall
    cells, free regions are connected non-wall cells. An agent and a
    destination in different free regions can never meet.
    """
    walls = tiles == TileKind.WALL
    _, wall_clusters = label(walls)
    free_labels, free_regions = label(~walls)
    free_cells = int(np.count_nonzero(~walls))
    if free_regions:
        largest = int(np.bincount(free_labels.ravel())[1:].max())
    else:
        largest = 0
    return {
        'wall_fraction': float(walls.mean()),
        'wall_clusters': int(wall_clusters),
        'free_regions': int(free_regions),
        'largest_region_share': largest / free_cells if free_cells else 0.0,
    }


class Reporter:
    """Generates summary statistics and formatted text report."""

    def __init__(self, config_path: Optional[str], seed: Optional[int]):
        self.config_path = config_path
        self.seed = seed
        self.step_metrics: List[Dict] = []
        self.peak_stalled = 0
        self.total_moves = 0
        self.layout: Dict[str, float] = {}

    def record_layout(self, tiles: np.ndarray) -> None:
        """Capture wall statistics once, right after generation."""
        self.layout = layout_stats(tiles)

    def update(self, state: "SimulationState") -> None:
        """Accumulate metrics per step."""
        self.step_metrics.append(state.metrics.copy())
        self.total_moves += int(state.metrics.get('moved', 0))
        stalled = int(state.metrics.get('stalled', 0))
        if stalled > self.peak_stalled:
            self.peak_stalled = stalled

    def generate_summary(self, final_state: "SimulationState",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        metrics = final_state.metrics
        total_agents = len(final_state.agents)
        steps = final_state.step
        moves_per_agent_step = (self.total_moves / (total_agents * steps)
                                if total_agents and steps else 0.0)

        lines = [
            "",
            "=" * 80,
            "                    DUNGEON CROWD SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path or '(defaults)'}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            "",
            "LAYOUT",
            "-" * 40,
        ]
        if self.layout:
            lines += [
                f"Wall Coverage:         {self.layout['wall_fraction']:.1%}",
                f"Wall Clusters:         {self.layout['wall_clusters']}",
                f"Free Regions:          {self.layout['free_regions']}",
                f"Largest Region Share:  {self.layout['largest_region_share']:.1%}",
            ]
        else:
            lines.append("(not recorded)")

        lines += [
            "",
            "SIMULATION METRICS",
            "-" * 40,
            f"Total Steps:           {steps}",
            f"Agents:                {total_agents}",
            f"Total Moves:           {self.total_moves}",
            f"Move Rate:             {moves_per_agent_step:.3f} moves/agent/step",
            f"Arrivals:              {int(metrics.get('arrivals', 0))}",
            f"Retargets:             {int(metrics.get('retargets', 0))}",
            f"Peak Stalled Agents:   {self.peak_stalled}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'simulation_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_state.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'simulation.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
