"""Tests for the dungeon-sim command line entry point."""

from pathlib import Path

from dungeon_sim.main import main
from dungeon_sim.model.grid import Grid
from dungeon_sim.model.tile import TileKind

SMALL = """
grid:
  size: 16
  num_walls: 4
  wall_growth_prob: 0.2
agents:
  count: 6
simulation:
  max_steps: 5
"""


def small_config(tmp_path: Path, text: str = SMALL) -> Path:
    path = tmp_path / "small.yaml"
    path.write_text(text)
    return path


class TestMain:
    def test_run_writes_csv(self, tmp_path: Path) -> None:
        out = tmp_path / "out"
        code = main(["--config", str(small_config(tmp_path)), "--seed", "1",
                     "--out-dir", str(out), "--no-snapshot", "--quiet"])
        assert code == 0
        lines = (out / "simulation_log.csv").read_text().strip().splitlines()
        assert len(lines) == 1 + 5 * 6

    def test_step_override_and_report(self, tmp_path: Path, capsys) -> None:
        out = tmp_path / "out"
        code = main(["--config", str(small_config(tmp_path)), "--steps", "2",
                     "--out-dir", str(out), "--no-csv"])
        assert code == 0
        printed = capsys.readouterr().out
        assert "DUNGEON CROWD SIMULATION REPORT" in printed
        assert (out / "final_state.png").exists()

    def test_missing_config(self, tmp_path: Path, capsys) -> None:
        code = main(["--config", str(tmp_path / "missing.yaml")])
        assert code == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path: Path, capsys) -> None:
        path = small_config(tmp_path, "grid: {wall_growth_prob: 0.9}")
        assert main(["--config", str(path)]) == 1
        assert "wall_growth_prob" in capsys.readouterr().err

    def test_override_breaking_capacity(self, tmp_path: Path, capsys) -> None:
        code = main(["--config", str(small_config(tmp_path)), "--agents", "200",
                     "--out-dir", str(tmp_path), "--quiet"])
        assert code == 1
        assert "do not fit" in capsys.readouterr().err

    def test_non_integer_seed(self, tmp_path: Path, capsys) -> None:
        path = small_config(tmp_path, SMALL + "  seed: abc\n")
        assert main(["--config", str(path), "--out-dir", str(tmp_path)]) == 1
        assert "seed" in capsys.readouterr().err

    def test_full_grid_reports_error(self, tmp_path: Path, capsys,
                                     monkeypatch) -> None:
        def fill_with_walls(self, count, growth_prob, rng):
            self.kinds.fill(TileKind.WALL)

        monkeypatch.setattr(Grid, "generate_walls", fill_with_walls)
        code = main(["--config", str(small_config(tmp_path)), "--seed", "3",
                     "--out-dir", str(tmp_path), "--quiet"])
        assert code == 1
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "No empty cell" in err
