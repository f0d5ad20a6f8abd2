"""Per-tick metrics log for smoke runs."""

import csv
from pathlib import Path
from typing import IO, Optional, TYPE_CHECKING

from ..model.state import METRIC_FIELDS

if TYPE_CHECKING:
    from ..model.state import SimulationState

COLUMNS = ['tick'] + METRIC_FIELDS


class CSVWriter:
    """
    Streams one row of board metrics per completed tick.

    Rows are flushed as they arrive so a run stopped at a breakpoint or by
    Ctrl-C still leaves a readable log.
    """

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self._stream: Optional[IO[str]] = None
        self._rows: Optional[csv.DictWriter] = None

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self) -> None:
        """Create the log (and its directory) and write the column header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._stream = open(self.output_path, 'w', newline='')
        self._rows = csv.DictWriter(self._stream, fieldnames=COLUMNS)
        self._rows.writeheader()

    def append(self, state: "SimulationState") -> None:
        """Log the metrics of the tick captured in `state`."""
        if not self.is_open:
            self.open()
        self._rows.writerow(state.to_csv_row())
        self._stream.flush()

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
            self._rows = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
