"""Tests for dungeon_sim.model.engine."""

import pytest

from dungeon_sim.config import SimulationConfig, GridConfig, AgentConfig
from dungeon_sim.model.agent import Agent
from dungeon_sim.model.engine import SimulationEngine
from dungeon_sim.model.grid import Grid
from dungeon_sim.model.tile import OCCUPIED, WALL, TileKind

RED = (1.0, 0.0, 0.0, 0.9)
BLUE = (0.0, 0.0, 1.0, 0.9)


def small_config(**overrides) -> SimulationConfig:
    config = SimulationConfig(
        grid=GridConfig(size=30, num_walls=20, wall_growth_prob=0.3),
        agents=AgentConfig(count=40),
        max_steps=30,
        seed=7,
    )
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


class TestEndToEnd:
    def test_single_agent_reaches_far_corner(self) -> None:
        config = SimulationConfig(grid=GridConfig(size=10, num_walls=0),
                                  agents=AgentConfig(count=1), seed=0)
        grid = Grid(10)
        agent = Agent.place(grid, 1, (0, 0), (9, 9), RED)
        engine = SimulationEngine(config, grid=grid, agents=[agent])

        for tick in range(1, 19):
            engine.step()
            assert agent.stalled_ticks == 0
            if tick < 18:
                assert agent.arrivals == 0
        assert agent.location == (9, 9)
        assert agent.arrivals == 1
        assert agent.steps_taken == 18


class TestTickInvariants:
    def test_occupancy_conserved_every_tick(self) -> None:
        engine = SimulationEngine(small_config())
        n = len(engine.agents)
        assert n == 40
        for _ in range(30):
            engine.step()
            grid = engine.grid
            assert grid.count(TileKind.OCCUPIED) == n
            assert grid.count(TileKind.DESTINATION) == n
            locations = {a.location for a in engine.agents}
            assert len(locations) == n
            for agent in engine.agents:
                assert grid.tile_at(agent.location) == OCCUPIED
                dest = grid.tile_at(agent.destination)
                assert dest.kind == TileKind.DESTINATION
                assert dest.color == pytest.approx(agent.appearance)

    def test_walls_are_permanent(self) -> None:
        engine = SimulationEngine(small_config())
        walls = engine.grid.wall_mask().copy()
        engine.run(20)
        assert (engine.grid.wall_mask() == walls).all()

    def test_agents_move_at_most_one_cell(self) -> None:
        engine = SimulationEngine(small_config())
        for _ in range(10):
            before = [a.location for a in engine.agents]
            engine.step()
            for old, agent in zip(before, engine.agents):
                dx = abs(old[0] - agent.location[0])
                dy = abs(old[1] - agent.location[1])
                assert dx + dy <= 1

    def test_same_seed_same_run(self) -> None:
        a = SimulationEngine(small_config())
        b = SimulationEngine(small_config())
        a.run(10)
        b.run(10)
        assert [x.location for x in a.agents] == [x.location for x in b.agents]
        assert (a.grid.kinds == b.grid.kinds).all()


class TestTickOrder:
    def _crossing(self, first_id: int) -> SimulationEngine:
        # Plus-shaped room: both agents need the centre cell (1, 1)
        grid = Grid(3)
        for cell in [(0, 0), (2, 0), (0, 2), (2, 2)]:
            grid.set(cell, WALL)
        horizontal = Agent.place(grid, 1, (0, 1), (2, 1), RED)
        vertical = Agent.place(grid, 2, (1, 0), (1, 2), BLUE)
        agents = [horizontal, vertical] if first_id == 1 else [vertical, horizontal]
        config = SimulationConfig(grid=GridConfig(size=3, num_walls=0),
                                  agents=AgentConfig(count=2), seed=0)
        return SimulationEngine(config, grid=grid, agents=agents)

    def test_earlier_agent_moves_first(self) -> None:
        engine = self._crossing(first_id=1)
        state = engine.step()
        horizontal, vertical = engine.agents
        assert horizontal.location == (1, 1)
        assert vertical.location == (1, 0)
        assert vertical.stalled_ticks == 1
        assert state.metrics['moved'] == 1
        assert state.metrics['stalled'] == 1

    def test_order_decides_winner(self) -> None:
        engine = self._crossing(first_id=2)
        engine.step()
        vertical, horizontal = engine.agents
        assert vertical.location == (1, 1)
        assert horizontal.location == (0, 1)


class TestEngineLifecycle:
    def test_snapshot_contents(self) -> None:
        engine = SimulationEngine(small_config())
        state = engine.step()
        assert state.step == 1
        assert len(state.agents) == 40
        assert state.metrics['occupied_cells'] == 40
        assert state.metrics['moved'] + state.metrics['stalled'] == 40
        assert state.tiles.shape == (30, 30)
        # Snapshot is a copy
        state.tiles[:, :] = TileKind.WALL
        assert engine.grid.count(TileKind.OCCUPIED) == 40

    def test_is_finished_after_max_steps(self) -> None:
        engine = SimulationEngine(small_config(max_steps=3))
        steps = 0
        while not engine.is_finished():
            engine.step()
            steps += 1
        assert steps == 3

    def test_zero_max_steps_never_finishes(self) -> None:
        engine = SimulationEngine(small_config(max_steps=0))
        engine.run(5)
        assert not engine.is_finished()

    def test_run_rejects_non_positive(self) -> None:
        engine = SimulationEngine(small_config())
        with pytest.raises(ValueError):
            engine.run(0)

    def test_render_feed_has_one_circle_per_agent(self) -> None:
        engine = SimulationEngine(small_config())
        engine.step()
        feed = engine.render_feed()
        circles = [d for d in feed if d.shape == "circle"]
        squares = [d for d in feed if d.shape == "square"]
        assert len(circles) == 40
        walls = engine.grid.count(TileKind.WALL)
        assert len(squares) == walls + 40

    def test_summary_counts(self) -> None:
        engine = SimulationEngine(small_config())
        engine.run(5)
        summary = engine.get_summary()
        assert summary['total_steps'] == 5
        assert summary['agents_total'] == 40
        assert summary['total_moves'] + summary['total_stalls'] == 200
