import argparse
import json
import logging
import sys
from typing import List, Optional

from exit_scanner import (DEFAULT_ENTRANCE, RESULTS_DIR, ExitScan, OverlayMode, SearchStrategy,
                          build_exit_payload, find_exits, save_exit_payload)
from maze_creation import MAZE_SUFFIXES, MazeError, load_maze, render_ascii

"""
How to use it

# Ask for the maze file interactively:
python maze_solver.py

# Solve a text maze ("rows cols" header, '#' walls):
python maze_solver.py mazes/maze1.txt

# CSV (0/1) or path-editor JSON mazes work too; JSON mazes bring their own entrance:
python maze_solver.py paths/path_20251104_145523.json

# Pick another entrance (row col, zero-indexed) and save the result as JSON:
python maze_solver.py mazes/maze1.txt --entrance 0 3 --save

# Legacy behaviour: one visited overlay, wiped whenever a search steps onto the entrance
python maze_solver.py mazes/maze1.txt --shared-overlay
"""


def greet():
    print("\nHello! Welcome to the A-MAZE-ING Maze Solver!")


def say_bye():
    print("\nBye! Have an A-MAZE-ING day! n_n")


def valid_filename(filename: str) -> bool:
    return any(len(filename) > len(suffix) and filename.lower().endswith(suffix)
               for suffix in MAZE_SUFFIXES)


def get_filename() -> str:
    """Ask for a maze filename until one with a supported extension is given."""
    while True:
        print("Please enter the maze filename: ")
        filename = input().strip()
        if valid_filename(filename):
            print(f"\nYou entered: {filename}")
            return filename
        print("\nPlease check the filename and try again!")


def report(scan: ExitScan):
    if scan.count > 0:
        print(f"\nFound {scan.count} exit(s) at the following positions: ")
        for exit_pos in scan.exits:
            print(exit_pos)
    else:
        print("\nUnsolvable!")


def solve(filename: str, entrance=None, overlay_mode: OverlayMode = OverlayMode.FRESH,
          strategy: SearchStrategy = SearchStrategy.ITERATIVE, show_maze: bool = True,
          save: bool = False, out_dir: str = RESULTS_DIR) -> ExitScan:
    grid, file_entrance = load_maze(filename)
    print("\nPrepare to be A-MAZED...\n")
    if entrance is None:
        entrance = file_entrance if file_entrance is not None else DEFAULT_ENTRANCE
    entrance = tuple(entrance)
    if show_maze:
        print(render_ascii(grid))

    scan = find_exits(grid, entrance, overlay_mode=overlay_mode, strategy=strategy)
    report(scan)
    if show_maze and scan.count:
        # E marks the entrance, X every exit
        print()
        print(render_ascii(grid, entrance, [e.cell for e in scan.exits]))

    if save:
        payload = build_exit_payload(scan, grid, entrance, overlay_mode=overlay_mode, source=filename)
        print(f"\nResult saved to: {save_exit_payload(payload, out_dir)}")
    return scan


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Count and list the exits of a text maze.")
    parser.add_argument("maze", nargs="?", default=None,
                        help=f"Maze file ({', '.join(MAZE_SUFFIXES)}). Asked for when omitted.")
    parser.add_argument("--entrance", type=int, nargs=2, metavar=("ROW", "COL"), default=None,
                        help=f"Entrance cell, zero-indexed (default: {DEFAULT_ENTRANCE} or the JSON start)")
    parser.add_argument("--shared-overlay", action="store_true",
                        help="Legacy walk: one visited overlay for the scan, wiped whenever a "
                             "search steps back onto the entrance")
    parser.add_argument("--recursive", action="store_true",
                        help="Use the recursive search (limited by Python's recursion depth)")
    parser.add_argument("--save", action="store_true", help="Save the exits as JSON")
    parser.add_argument("--out-dir", type=str, default=RESULTS_DIR, help="Folder for --save")
    parser.add_argument("--quiet-maze", action="store_true", help="Do not print the maze")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    greet()
    status = 0
    try:
        filename = args.maze or get_filename()
        solve(
            filename,
            entrance=args.entrance,
            overlay_mode=OverlayMode.SHARED if args.shared_overlay else OverlayMode.FRESH,
            strategy=SearchStrategy.RECURSIVE if args.recursive else SearchStrategy.ITERATIVE,
            show_maze=not args.quiet_maze,
            save=args.save,
            out_dir=args.out_dir,
        )
    except FileNotFoundError:
        print("\nSorry, we hit a roadblock.\nPlease check the filename and try again.")
        status = 1
    except OSError as e:
        print(f"\nOops! Something went awry...\n{e}\nPlease check the filename and try again.")
        status = 1
    except (MazeError, json.JSONDecodeError) as e:
        print(f"\nThere was trouble reading the maze: {e}")
        status = 1
    except RecursionError:
        print("\nThe maze is too open for the recursive search. Run again without --recursive.")
        status = 1
    say_bye()
    return status


if __name__ == "__main__":
    sys.exit(main())
