"""
Reachability search between two cells of a maze grid.

A search walks depth-first from the entrance through open cells, never
stepping straight back to the cell it just left. Revisits are prevented by a
VisitedOverlay, and the overlay is marked one step behind the walker: entering
a cell marks the cell the walker arrived from, not the cell itself.

Given a `reset_at` cell, the walk follows the legacy solver instead: each step
onto that cell wipes the overlay, and stepping back is not skipped.

Two renditions share the exact same visit order, marking and short-circuit
behaviour:
- has_path: explicit stack, no interpreter recursion limit.
- has_path_recursive: plain recursion. Its depth grows with the open area of
  the maze, so very open mazes can raise RecursionError.
"""

import logging
from enum import IntEnum
from typing import Callable, Iterator, List, Optional, Set, Tuple

import numpy as np

from maze_creation import BLOCKED, Cell, as_grid, check_cell

logger = logging.getLogger(__name__)


class Direction(IntEnum):
    """Side of the current cell the walker arrived from."""
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITE[self]

    @property
    def offset(self) -> Tuple[int, int]:
        # (dr, dc) from the current cell back to the previous one
        return _BACK_OFFSET[self]


_OPPOSITE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_BACK_OFFSET = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}

# Exploration order: below, right, left, above.
# Each move is (dr, dc, direction the neighbour is entered from).
MOVES = (
    (1, 0, Direction.UP),
    (0, 1, Direction.LEFT),
    (0, -1, Direction.RIGHT),
    (-1, 0, Direction.DOWN),
)


class VisitedOverlay:
    """Visited flags for every cell of one grid."""

    UNVISITED = False
    VISITED = True

    def __init__(self, shape: Tuple[int, int]):
        self.shape = tuple(shape)
        self._marks = np.zeros(self.shape, dtype=bool)

    @classmethod
    def for_grid(cls, grid: np.ndarray) -> "VisitedOverlay":
        return cls(grid.shape)

    def _inside(self, cell: Cell) -> bool:
        r, c = cell
        return 0 <= r < self.shape[0] and 0 <= c < self.shape[1]

    def mark(self, cell: Cell):
        # cells off the grid have nothing to remember
        if self._inside(cell):
            self._marks[cell] = self.VISITED

    def is_visited(self, cell: Cell) -> bool:
        return self._inside(cell) and bool(self._marks[cell])

    def clear(self):
        self._marks[:] = self.UNVISITED

    def visited_count(self) -> int:
        return int(self._marks.sum())

    def __repr__(self):
        return f"VisitedOverlay(shape={self.shape}, visited={self.visited_count()})"


# -----------------------------
#  Boundary guards
# -----------------------------
def in_bounds(cell: Cell, grid: np.ndarray) -> bool:
    r, c = cell
    return 0 <= r < grid.shape[0] and 0 <= c < grid.shape[1]


def guard_cells(cell: Cell, grid: np.ndarray) -> List[Cell]:
    """
    Interior neighbours of a boundary cell, one per side of the grid the cell
    touches (two for a corner). Neighbours that would fall off a one-row or
    one-column grid are left out.
    """
    r, c = cell
    last_row, last_col = grid.shape[0] - 1, grid.shape[1] - 1
    guards = []
    if r == 0 and last_row > 0:
        guards.append((1, c))
    if r == last_row and last_row > 0:
        guards.append((r - 1, c))
    if c == 0 and last_col > 0:
        guards.append((r, 1))
    if c == last_col and last_col > 0:
        guards.append((r, c - 1))
    return guards


def is_walled_off(cell: Cell, grid: np.ndarray) -> bool:
    """True when a wall sits right behind the boundary cell, so it can never be entered."""
    return any(grid[g] == BLOCKED for g in guard_cells(cell, grid))


def _prepare(current: Cell, target: Cell, grid, overlay: VisitedOverlay):
    grid = as_grid(grid)
    target = check_cell(target, grid, "target")
    if overlay.shape != grid.shape:
        raise ValueError(f"Overlay shape {overlay.shape} does not match the maze {grid.shape}.")
    current = (int(current[0]), int(current[1]))
    return current, target, grid


def _blocked_ends(entrance: Cell, target: Cell, grid: np.ndarray) -> bool:
    if is_walled_off(target, grid):
        logger.debug("Exit %s is walled off", target)
        return True
    if in_bounds(entrance, grid) and is_walled_off(entrance, grid):
        logger.debug("Entrance %s is walled off", entrance)
        return True
    return False


def _enter(cell: Cell, came_from: Direction, target: Cell, grid: np.ndarray,
           overlay: VisitedOverlay, reset_at: Optional[Cell] = None,
           open_resets: Set[Direction] = frozenset()) -> Optional[bool]:
    """
    Step onto `cell`. Returns True/False when the step settles the branch,
    None when the cell is open and its neighbours still have to be explored.
    """
    if cell == reset_at:
        # re-entering from a side already open on the branch would replay that walk forever
        if came_from in open_resets:
            return False
        overlay.clear()
    if cell == target:
        return True
    if not in_bounds(cell, grid):
        return False
    if overlay.is_visited(cell):
        return False
    dr, dc = came_from.offset
    overlay.mark((cell[0] + dr, cell[1] + dc))
    if grid[cell] == BLOCKED:
        return False
    return None


def _moves_from(cell: Cell, came_from: Direction,
                skip_back: bool = True) -> Iterator[Tuple[Cell, Direction]]:
    back = came_from.opposite
    r, c = cell
    for dr, dc, entered_from in MOVES:
        if skip_back and entered_from == back:
            continue
        yield (r + dr, c + dc), entered_from


def _open_frame(cell: Cell, came_from: Direction, reset_at: Optional[Cell],
                open_resets: Set[Direction]):
    """Neighbour moves of an open cell, plus the reset side it holds open (or None)."""
    side = None
    if cell == reset_at:
        side = came_from
        open_resets.add(side)
    return _moves_from(cell, came_from, skip_back=reset_at is None), side


# -----------------------------
#  Search
# -----------------------------
def has_path(current: Cell, target: Cell, grid, came_from: Direction,
             overlay: VisitedOverlay, reset_at: Optional[Cell] = None) -> bool:
    """
    Decide whether `target` can be reached from `current` through open cells.

    `current` is the entrance and may lie off the grid. `came_from` is the
    side it was entered from. Only `overlay` is modified.

    With `reset_at` set, the legacy walk is reproduced: every step onto that
    cell wipes the overlay, and the way back is tried like any other move.
    A step back onto it from a side already open on the current branch is a
    dead end.
    """
    current, target, grid = _prepare(current, target, grid, overlay)
    if _blocked_ends(current, target, grid):
        return False
    came_from = Direction(came_from)
    open_resets: Set[Direction] = set()

    outcome = _enter(current, came_from, target, grid, overlay, reset_at, open_resets)
    if outcome is not None:
        return outcome

    # one frame per open cell on the current branch
    stack = [_open_frame(current, came_from, reset_at, open_resets)]
    while stack:
        step = next(stack[-1][0], None)
        if step is None:
            _, side = stack.pop()
            open_resets.discard(side)
            continue
        cell, entered_from = step
        outcome = _enter(cell, entered_from, target, grid, overlay, reset_at, open_resets)
        if outcome:
            return True
        if outcome is None:
            stack.append(_open_frame(cell, entered_from, reset_at, open_resets))
    return False


def has_path_recursive(current: Cell, target: Cell, grid, came_from: Direction,
                       overlay: VisitedOverlay, reset_at: Optional[Cell] = None) -> bool:
    """Same contract as has_path, one Python frame per step."""
    current, target, grid = _prepare(current, target, grid, overlay)
    if _blocked_ends(current, target, grid):
        return False
    open_resets: Set[Direction] = set()

    def walk(cell: Cell, entered_from: Direction) -> bool:
        outcome = _enter(cell, entered_from, target, grid, overlay, reset_at, open_resets)
        if outcome is not None:
            return outcome
        moves, side = _open_frame(cell, entered_from, reset_at, open_resets)
        try:
            return any(walk(nxt, nxt_from) for nxt, nxt_from in moves)
        finally:
            open_resets.discard(side)

    return walk(current, Direction(came_from))


SearchFn = Callable[..., bool]
