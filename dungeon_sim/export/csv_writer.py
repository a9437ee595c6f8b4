"""CSV export functionality for the dungeon crowd simulation."""

import csv
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.state import SimulationState


FIELDNAMES = ['step', 'agent_id', 'x', 'y', 'dest_x', 'dest_y',
              'stalled_ticks', 'state']


class CSVWriter:
    """
    Exports simulation data to CSV format incrementally.

    Output format:
        step,agent_id,x,y,dest_x,dest_y,stalled_ticks,state
        1,1,5,10,40,12,0,moving
        ...
    """

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self.file: Optional[object] = None
        self.writer: Optional[csv.DictWriter] = None
        self._is_open = False

    def open(self) -> None:
        """Initialize file and write header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', newline='')
        self.writer = csv.DictWriter(self.file, fieldnames=FIELDNAMES)
        self.writer.writeheader()
        self._is_open = True

    def append(self, state: "SimulationState") -> None:
        """Write state data for current step."""
        if not self._is_open:
            self.open()
        self.writer.writerows(state.to_csv_rows())
        self.file.flush()

    def close(self) -> None:
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None
            self._is_open = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
