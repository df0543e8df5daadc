# This code reads maze files and creates the grid the solver works on
# The maze is a 2D array of 0s and 1s
# 1s are the walls and 0s are the paths

import csv
import json
import os
import numpy as np
from typing import Iterable, List, Optional, Sequence, Tuple

Cell = Tuple[int, int]

OPEN = 0
BLOCKED = 1

WALL_CHAR = "#"
MAZE_SUFFIXES = (".txt", ".csv", ".json")


class MazeError(ValueError):
    """Base class for maze input problems."""


class InvalidGrid(MazeError):
    """The grid is empty, not rectangular, or holds values other than 0/1."""


class InvalidCoordinate(MazeError):
    """A cell lies outside the grid or is not a (row, col) pair."""


# -----------------------------
#  Grid construction / validation
# -----------------------------
def as_grid(maze) -> np.ndarray:
    """
    Convert nested lists (or an array) of 0/1 values into a read-only
    int8 grid. Booleans are accepted, True meaning wall.
    """
    if isinstance(maze, np.ndarray) and maze.dtype == np.int8 and not maze.flags.writeable:
        validate_grid(maze)
        return maze

    if not isinstance(maze, np.ndarray):
        rows = list(maze)
        if not rows:
            raise InvalidGrid("The maze has no rows.")
        widths = {len(row) for row in rows}
        if len(widths) != 1:
            raise InvalidGrid(f"The maze is not rectangular, row lengths: {sorted(widths)}")
        maze = rows

    arr = np.array(maze)
    validate_grid(arr)
    grid = arr.astype(np.int8)
    grid.flags.writeable = False
    return grid


def validate_grid(grid: np.ndarray):
    if grid.ndim != 2:
        raise InvalidGrid(f"The maze must be two-dimensional, got {grid.ndim} dimension(s).")
    if grid.shape[0] < 1 or grid.shape[1] < 1:
        raise InvalidGrid(f"The maze is empty: {grid.shape[0]} x {grid.shape[1]}.")
    if grid.dtype.kind not in "biu":
        raise InvalidGrid(f"Maze cells must be 0 or 1, got values of type {grid.dtype}.")
    if not np.isin(grid, (OPEN, BLOCKED)).all():
        raise InvalidGrid("Maze cells must be 0 (path) or 1 (wall).")


def check_cell(cell, grid: np.ndarray, name: str = "cell") -> Cell:
    """Return `cell` as a tuple of ints, raising InvalidCoordinate when it is off the grid."""
    try:
        r, c = cell
    except (TypeError, ValueError):
        raise InvalidCoordinate(f"The {name} must be a (row, col) pair, got {cell!r}.") from None
    if isinstance(r, bool) or isinstance(c, bool) or not isinstance(r, (int, np.integer)) \
            or not isinstance(c, (int, np.integer)):
        raise InvalidCoordinate(f"The {name} must hold integers, got {cell!r}.")
    rows, cols = grid.shape
    if not (0 <= r < rows and 0 <= c < cols):
        raise InvalidCoordinate(
            f"The {name} {(int(r), int(c))} is outside the {rows} x {cols} maze."
        )
    return int(r), int(c)


# -----------------------------
#  Text mazes: "rows cols" header, then '#' walls
# -----------------------------
def pull_dimensions(first_line: str) -> Tuple[int, int]:
    """Read the (rows, cols) header of a text maze."""
    parts = first_line.split()
    if len(parts) < 2:
        raise InvalidGrid(f"Could not read the maze dimensions from {first_line.strip()!r}.")
    try:
        rows, cols = int(parts[0]), int(parts[1])
    except ValueError:
        raise InvalidGrid(
            f"We encountered a problem calculating the maze dimensions from {first_line.strip()!r}."
        ) from None
    if rows < 1 or cols < 1:
        raise InvalidGrid(f"The maze dimensions must be positive, got {rows} by {cols}.")
    return rows, cols


def translate_maze_row(row_text: str, cols: int) -> List[int]:
    # '#' --> 1, anything else --> 0; short rows are padded with open cells
    if len(row_text) > cols:
        raise InvalidGrid(f"Maze row {row_text!r} is longer than the declared {cols} columns.")
    row = [BLOCKED if ch == WALL_CHAR else OPEN for ch in row_text]
    row.extend([OPEN] * (cols - len(row)))
    return row


def parse_text_maze(lines: Iterable[str]) -> np.ndarray:
    lines = [line.rstrip("\r\n") for line in lines]
    if not lines:
        raise InvalidGrid("The maze file is empty.")
    rows, cols = pull_dimensions(lines[0])

    body = lines[1:]
    while body and not body[-1].strip():
        body.pop()
    if len(body) > rows:
        raise InvalidGrid(f"The maze has {len(body)} rows but the header declares {rows}.")

    maze = np.zeros((rows, cols), dtype=np.int8)
    for row_num, row_text in enumerate(body):
        maze[row_num] = translate_maze_row(row_text, cols)
    maze.flags.writeable = False
    return maze


def read_text_maze(file_path: str) -> np.ndarray:
    with open(file_path, "r", encoding="utf-8") as f:
        return parse_text_maze(f.readlines())


# -----------------------------
#  CSV and JSON mazes
# -----------------------------
def create_maze(file_path: str) -> np.ndarray:
    maze = []

    with open(file_path, "r", newline="") as file:
        reader = csv.reader(file)
        for row in reader:
            if not row:
                continue
            try:
                maze.append([int(cell) for cell in row])
            except ValueError:
                raise InvalidGrid(f"CSV maze rows must hold 0/1 values, got {row!r}.") from None
    return as_grid(maze)


def read_json_maze(file_path: str) -> Tuple[np.ndarray, Cell]:
    """
    Load a maze saved by the path editor:
    {
      "rows": int, "cols": int,
      "start": [r,c],
      "path": [[r,c], ...]
    }
    Cells on the path are open, everything else is wall, and `start`
    becomes the entrance.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    try:
        rows = int(data["rows"])
        cols = int(data["cols"])
    except (KeyError, TypeError, ValueError):
        raise InvalidGrid("JSON mazes need integer 'rows' and 'cols'.") from None
    if rows < 1 or cols < 1:
        raise InvalidGrid(f"The maze dimensions must be positive, got {rows} by {cols}.")

    maze = np.full((rows, cols), BLOCKED, dtype=np.int8)
    for rc in data.get("path", []):
        if isinstance(rc, list) and len(rc) == 2:
            try:
                r, c = int(rc[0]), int(rc[1])
            except (TypeError, ValueError):
                raise InvalidGrid(
                    f"JSON maze path cells must be [row, col] integers, got {rc!r}."
                ) from None
            if 0 <= r < rows and 0 <= c < cols:
                maze[r, c] = OPEN
    maze.flags.writeable = False

    start = data.get("start", [0, 0])
    try:
        start = tuple(int(v) for v in start)
    except (TypeError, ValueError):
        raise InvalidCoordinate(
            f"The entrance must be a (row, col) pair of integers, got {start!r}."
        ) from None
    entrance = check_cell(start, maze, "entrance")
    return maze, entrance


def load_maze(file_path: str) -> Tuple[np.ndarray, Optional[Cell]]:
    """Load any supported maze file. The entrance is only known for JSON mazes."""
    suffix = os.path.splitext(file_path)[1].lower()
    if suffix == ".txt":
        return read_text_maze(file_path), None
    if suffix == ".csv":
        return create_maze(file_path), None
    if suffix == ".json":
        return read_json_maze(file_path)
    raise InvalidGrid(f"Unsupported maze file {file_path!r}. Options: {list(MAZE_SUFFIXES)}")


# -----------------------------
#  Rendering
# -----------------------------
def render_ascii(grid: np.ndarray, entrance: Optional[Cell] = None,
                 exits: Sequence[Cell] = ()) -> str:
    rows = [[WALL_CHAR if cell == BLOCKED else " " for cell in row] for row in grid.tolist()]
    for (r, c) in exits:
        rows[r][c] = "X"
    if entrance is not None:
        er, ec = entrance
        rows[er][ec] = "E"
    return "\n".join("".join(row) for row in rows)

