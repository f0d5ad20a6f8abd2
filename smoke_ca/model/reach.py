"""Walk-distance field from the emitter, used to measure the smoke front."""

import numpy as np
from collections import deque
from typing import Iterable, Tuple


class ReachField:
    """
    Pre-computed 4-connected walk distance from one or more source cells.
    Walls are impassable; unreachable cells hold inf.
    """

    def __init__(self, grid_width: int, grid_height: int):
        self.width = grid_width
        self.height = grid_height
        self.field = np.full((grid_height, grid_width), np.inf)

    def compute(self, walls: np.ndarray,
                sources: Iterable[Tuple[int, int]]) -> None:
        """Multi-source BFS from (row, col) sources."""
        self.field = np.full((self.height, self.width), np.inf)

        queue = deque()
        for row, col in sources:
            if 0 <= row < self.height and 0 <= col < self.width:
                self.field[row, col] = 0
                queue.append((row, col))

        directions = [(-1, 0), (1, 0), (0, -1), (0, 1)]
        while queue:
            row, col = queue.popleft()
            dist = self.field[row, col]
            for d_row, d_col in directions:
                nr, nc = row + d_row, col + d_col
                if (0 <= nr < self.height and 0 <= nc < self.width
                        and not walls[nr, nc]
                        and self.field[nr, nc] == np.inf):
                    self.field[nr, nc] = dist + 1
                    queue.append((nr, nc))

    def front_distance(self, mask: np.ndarray) -> float:
        """Largest finite distance among cells selected by `mask` (0 if none)."""
        reachable = mask & np.isfinite(self.field)
        if not np.any(reachable):
            return 0.0
        return float(np.max(self.field[reachable]))
