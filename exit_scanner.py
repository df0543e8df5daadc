import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, NamedTuple, Optional, Tuple

import numpy as np

from maze_creation import OPEN, Cell, as_grid, check_cell
from path_finder import Direction, SearchFn, VisitedOverlay, has_path, has_path_recursive

logger = logging.getLogger(__name__)

# Second cell of the top row
DEFAULT_ENTRANCE: Cell = (0, 1)
RESULTS_DIR = "results"


class OverlayMode(Enum):
    """How visited marks are kept between the searches of one scan."""
    FRESH = "fresh"    # every search starts from a clean overlay
    SHARED = "shared"  # one overlay for the scan, wiped on every step onto the entrance


class SearchStrategy(Enum):
    ITERATIVE = "iterative"
    RECURSIVE = "recursive"


SEARCHES: Dict[SearchStrategy, SearchFn] = {
    SearchStrategy.ITERATIVE: has_path,
    SearchStrategy.RECURSIVE: has_path_recursive,
}


@dataclass(frozen=True, order=True)
class ExitRecord:
    """A reachable boundary cell, 1-indexed."""
    row: int
    col: int

    @classmethod
    def from_cell(cls, cell: Cell) -> "ExitRecord":
        return cls(cell[0] + 1, cell[1] + 1)

    @property
    def cell(self) -> Cell:
        return (self.row - 1, self.col - 1)

    def __str__(self):
        return f"{self.row},{self.col}"


class ExitScan(NamedTuple):
    count: int
    exits: Tuple[ExitRecord, ...]


def boundary_cells(grid: np.ndarray, entrance: Optional[Cell] = None) -> Iterator[Cell]:
    """
    Boundary cells in scan order: top row, bottom row, then the first and
    last column of every row in between. The entrance is never yielded.
    """
    rows, cols = grid.shape
    last_row, last_col = rows - 1, cols - 1

    candidates = [(0, c) for c in range(cols)]
    if last_row > 0:
        candidates += [(last_row, c) for c in range(cols)]
    for r in range(1, last_row):
        candidates.append((r, 0))
        if last_col > 0:
            candidates.append((r, last_col))

    for cell in candidates:
        if cell != entrance:
            yield cell


def find_exits(grid, entrance: Cell = DEFAULT_ENTRANCE,
               overlay_mode: OverlayMode = OverlayMode.FRESH,
               strategy: SearchStrategy = SearchStrategy.ITERATIVE) -> ExitScan:
    """
    Count and list the open boundary cells reachable from `entrance`.

    The grid is only read. With OverlayMode.SHARED a single overlay is threaded
    through every search and the legacy walk is reproduced: the overlay is
    wiped each time a search steps onto the entrance, at the start of every
    search and again whenever the walk comes back to it.
    """
    grid = as_grid(grid)
    entrance = check_cell(entrance, grid, "entrance")
    overlay_mode = OverlayMode(overlay_mode)
    search = SEARCHES[SearchStrategy(strategy)]

    logger.debug("Scanning %d x %d maze from entrance %s (%s overlay, %s search)",
                 grid.shape[0], grid.shape[1], entrance, overlay_mode.value, search.__name__)

    shared = VisitedOverlay.for_grid(grid) if overlay_mode is OverlayMode.SHARED else None
    reset_at = entrance if shared is not None else None
    exits = []
    for cell in boundary_cells(grid, entrance):
        if grid[cell] != OPEN:
            continue
        overlay = shared if shared is not None else VisitedOverlay.for_grid(grid)
        if search(entrance, cell, grid, Direction.UP, overlay, reset_at=reset_at):
            record = ExitRecord.from_cell(cell)
            logger.debug("Exit found at %s (%d cells marked)", record, overlay.visited_count())
            exits.append(record)

    logger.debug("Scan finished: %d exit(s)", len(exits))
    return ExitScan(len(exits), tuple(exits))


# -----------------------------
#  Export
# -----------------------------
def build_exit_payload(scan: ExitScan, grid, entrance: Cell,
                       overlay_mode: OverlayMode = OverlayMode.FRESH,
                       source: Optional[str] = None) -> Dict[str, Any]:
    grid = as_grid(grid)
    return {
        "rows": int(grid.shape[0]),
        "cols": int(grid.shape[1]),
        "entrance": [int(entrance[0]), int(entrance[1])],
        "count": scan.count,
        "exits": [[e.row, e.col] for e in scan.exits],
        "overlay_mode": OverlayMode(overlay_mode).value,
        "source": source,
        "created_at": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
    }


def save_exit_payload(payload: Dict[str, Any], directory: str = RESULTS_DIR) -> str:
    os.makedirs(directory, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    fullpath = os.path.join(directory, f"exits_{ts}.json")
    with open(fullpath, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    return fullpath
