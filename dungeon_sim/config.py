"""Configuration dataclasses and YAML loader for the dungeon crowd simulation."""

from dataclasses import dataclass, field
from typing import Tuple, Dict, Any, Optional
from pathlib import Path
import yaml

from .model.grid import DEFAULT_MAX_EMPTY_ATTEMPTS
from .model.agent import DEFAULT_ALPHA, DEFAULT_RETRY_LIMIT


@dataclass
class GridConfig:
    size: int = 100
    cell_scale: int = 10           # pixels per cell
    num_walls: int = 100           # seed-phase wall count
    wall_growth_prob: float = 0.48  # k, per wall neighbor (0.0-0.5)
    max_empty_attempts: int = DEFAULT_MAX_EMPTY_ATTEMPTS


@dataclass
class AgentConfig:
    count: int = 300
    retry_limit: int = DEFAULT_RETRY_LIMIT
    reset_stall_on_retarget: bool = False
    alpha: float = DEFAULT_ALPHA


@dataclass
class ColorConfig:
    empty: Tuple[float, float, float] = (0.5, 0.3, 0.4)
    wall: Tuple[float, float, float, float] = (0.2, 0.1, 0.2, 1.0)
    wall_shadow: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.45)


@dataclass
class SimulationConfig:
    grid: GridConfig = field(default_factory=GridConfig)
    agents: AgentConfig = field(default_factory=AgentConfig)
    colors: ColorConfig = field(default_factory=ColorConfig)
    max_steps: int = 500  # 0 = run until interrupted

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    gif_every: int = 5
    quiet: bool = False
    seed: Optional[int] = None
    out_dir: Path = field(default_factory=lambda: Path("./output"))

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot produce a valid run."""
        g, a = self.grid, self.agents
        if g.size < 3:
            raise ValueError(f"grid.size must be at least 3, got {g.size}")
        if g.cell_scale <= 0:
            raise ValueError(f"grid.cell_scale must be positive, got {g.cell_scale}")
        if g.num_walls < 0 or a.count < 0:
            raise ValueError("grid.num_walls and agents.count must be non-negative")
        if not 0.0 <= g.wall_growth_prob <= 0.5:
            raise ValueError(
                f"grid.wall_growth_prob must be in [0, 0.5], got {g.wall_growth_prob}")
        if g.max_empty_attempts <= 0:
            raise ValueError("grid.max_empty_attempts must be positive")
        if g.num_walls + 2 * a.count >= g.size * g.size:
            raise ValueError(
                f"{g.num_walls} walls and {a.count} agents do not fit on a "
                f"{g.size}x{g.size} grid")
        if a.retry_limit < 0:
            raise ValueError("agents.retry_limit must be non-negative")
        if not 0.0 <= a.alpha <= 1.0:
            raise ValueError(f"agents.alpha must be in [0, 1], got {a.alpha}")
        if self.max_steps < 0:
            raise ValueError("simulation.max_steps must be non-negative")
        if self.gif_every <= 0:
            raise ValueError("export.gif_every must be positive")
        if self.seed is not None and (isinstance(self.seed, bool)
                                      or not isinstance(self.seed, int)):
            raise ValueError(f"simulation.seed must be an integer, got {self.seed!r}")


def _parse_color(value: Any, length: int, name: str) -> Tuple[float, ...]:
    """Parse an RGB/RGBA list from raw YAML data."""
    if not isinstance(value, (list, tuple)) or len(value) != length:
        raise ValueError(f"{name} must be a list of {length} numbers, got {value!r}")
    color = tuple(float(c) for c in value)
    if any(c < 0.0 or c > 1.0 for c in color):
        raise ValueError(f"{name} components must be in [0, 1], got {value!r}")
    return color


def _parse_flag(section: Dict, key: str, default: bool, name: str) -> bool:
    """Read a boolean option, rejecting strings and numbers."""
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value


def _parse_colors(colors_raw: Dict) -> ColorConfig:
    defaults = ColorConfig()
    return ColorConfig(
        empty=_parse_color(colors_raw.get('empty', defaults.empty), 3, 'colors.empty'),
        wall=_parse_color(colors_raw.get('wall', defaults.wall), 4, 'colors.wall'),
        wall_shadow=_parse_color(colors_raw.get('wall_shadow', defaults.wall_shadow),
                                 4, 'colors.wall_shadow')
    )


def default_config() -> SimulationConfig:
    """Configuration matching the built-in defaults, without a file."""
    return SimulationConfig()


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Top level of {config_path} must be a mapping")

    # Parse grid config
    grid_raw = raw.get('grid', {})
    gd = GridConfig()
    grid = GridConfig(
        size=int(grid_raw.get('size', gd.size)),
        cell_scale=int(grid_raw.get('cell_scale', gd.cell_scale)),
        num_walls=int(grid_raw.get('num_walls', gd.num_walls)),
        wall_growth_prob=float(grid_raw.get('wall_growth_prob', gd.wall_growth_prob)),
        max_empty_attempts=int(grid_raw.get('max_empty_attempts', gd.max_empty_attempts))
    )

    # Parse agent config
    agents_raw = raw.get('agents', {})
    ad = AgentConfig()
    agents = AgentConfig(
        count=int(agents_raw.get('count', ad.count)),
        retry_limit=int(agents_raw.get('retry_limit', ad.retry_limit)),
        reset_stall_on_retarget=_parse_flag(
            agents_raw, 'reset_stall_on_retarget', ad.reset_stall_on_retarget,
            'agents.reset_stall_on_retarget'),
        alpha=float(agents_raw.get('alpha', ad.alpha))
    )

    colors = _parse_colors(raw.get('colors', {}))

    # Parse simulation config
    sim_raw = raw.get('simulation', {})

    # Parse export config (optional)
    export_raw = raw.get('export', {})

    config = SimulationConfig(
        grid=grid,
        agents=agents,
        colors=colors,
        max_steps=int(sim_raw.get('max_steps', 500)),
        seed=sim_raw.get('seed'),
        csv_enabled=_parse_flag(export_raw, 'csv', True, 'export.csv'),
        snapshot_enabled=_parse_flag(export_raw, 'snapshot', True, 'export.snapshot'),
        gif_enabled=_parse_flag(export_raw, 'gif', False, 'export.gif'),
        gif_every=int(export_raw.get('gif_every', 5))
    )
    config.validate()
    return config
