import io
import json
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

import maze_solver

CORRIDOR_TXT = """5 5
# ###
# ###
# ###
# ###
# ###
"""

OPEN_TXT = """3 3



"""

OPEN_4X4_TXT = """4 4




"""

SEALED_TXT = """3 3
# #
###
# #
"""


class TestMazeSolverCli(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def write(self, name: str, content: str) -> str:
        path = os.path.join(self.tmp, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def run_main(self, argv):
        out = io.StringIO()
        with redirect_stdout(out):
            status = maze_solver.main(argv)
        return status, out.getvalue()

    def test_reports_exits(self):
        status, out = self.run_main([self.write("corridor.txt", CORRIDOR_TXT)])
        self.assertEqual(status, 0)
        self.assertIn("Hello! Welcome to the A-MAZE-ING Maze Solver!", out)
        self.assertIn("Prepare to be A-MAZED...", out)
        self.assertIn("# ###", out)
        self.assertIn("Found 1 exit(s) at the following positions:", out)
        self.assertIn("\n5,2\n", out)
        self.assertTrue(out.rstrip().endswith("Bye! Have an A-MAZE-ING day! n_n"))

    def test_unsolvable(self):
        status, out = self.run_main([self.write("sealed.txt", SEALED_TXT), "--quiet-maze"])
        self.assertEqual(status, 0)
        self.assertIn("Unsolvable!", out)
        self.assertNotIn("###", out)

    def test_open_maze_in_both_overlay_modes(self):
        path = self.write("open4.txt", OPEN_4X4_TXT)
        _, fresh = self.run_main([path])
        _, shared = self.run_main([path, "--shared-overlay"])
        self.assertIn("Found 11 exit(s)", fresh)
        self.assertIn("Found 11 exit(s)", shared)

    def test_marks_entrance_and_exits_after_the_scan(self):
        _, out = self.run_main([self.write("corridor.txt", CORRIDOR_TXT)])
        self.assertIn("#E###\n# ###\n# ###\n# ###\n#X###", out)
        self.assertLess(out.index("5,2"), out.index("#E###"))

    def test_no_marked_maze_when_unsolvable(self):
        _, out = self.run_main([self.write("sealed.txt", SEALED_TXT)])
        self.assertIn("Unsolvable!", out)
        self.assertNotIn("#E", out)

    def test_recursive_search_flag(self):
        _, out = self.run_main([self.write("open.txt", OPEN_TXT), "--recursive"])
        self.assertIn("Found 7 exit(s)", out)

    def test_custom_entrance(self):
        _, out = self.run_main([self.write("open.txt", OPEN_TXT), "--entrance", "1", "0"])
        self.assertIn("Found 7 exit(s)", out)
        self.assertNotIn("\n2,1\n", out)

    def test_json_maze_brings_its_entrance(self):
        payload = {"rows": 3, "cols": 3, "start": [1, 0], "path": [[1, 0], [1, 1], [1, 2]]}
        _, out = self.run_main([self.write("path.json", json.dumps(payload))])
        self.assertIn("Found 1 exit(s)", out)
        self.assertIn("\n2,3\n", out)

    def test_save(self):
        out_dir = os.path.join(self.tmp, "results")
        path = self.write("corridor.txt", CORRIDOR_TXT)
        status, out = self.run_main([path, "--save", "--out-dir", out_dir])
        self.assertEqual(status, 0)
        self.assertIn("Result saved to:", out)
        saved = os.listdir(out_dir)
        self.assertEqual(len(saved), 1)
        with open(os.path.join(out_dir, saved[0]), "r", encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(data["exits"], [[5, 2]])
        self.assertEqual(data["source"], path)

    def test_missing_file(self):
        status, out = self.run_main([os.path.join(self.tmp, "missing.txt")])
        self.assertEqual(status, 1)
        self.assertIn("Sorry, we hit a roadblock.", out)
        self.assertIn("Bye! Have an A-MAZE-ING day!", out)

    def test_malformed_maze(self):
        status, out = self.run_main([self.write("bad.txt", "three by three\n###\n")])
        self.assertEqual(status, 1)
        self.assertIn("There was trouble reading the maze", out)

    def test_json_entrance_not_numbers(self):
        payload = {"rows": 3, "cols": 3, "start": ["a", 0], "path": []}
        status, out = self.run_main([self.write("path.json", json.dumps(payload))])
        self.assertEqual(status, 1)
        self.assertIn("There was trouble reading the maze", out)
        self.assertIn("Bye! Have an A-MAZE-ING day!", out)

    def test_entrance_off_the_grid(self):
        status, out = self.run_main([self.write("open.txt", OPEN_TXT), "--entrance", "9", "9"])
        self.assertEqual(status, 1)
        self.assertIn("outside the 3 x 3 maze", out)

    def test_prompts_until_valid_filename(self):
        path = self.write("corridor.txt", CORRIDOR_TXT)
        with patch("builtins.input", side_effect=["maze", ".txt", path]) as fake_input:
            status, out = self.run_main([])
        self.assertEqual(status, 0)
        self.assertEqual(fake_input.call_count, 3)
        self.assertEqual(out.count("Please check the filename and try again!"), 2)
        self.assertIn(f"You entered: {path}", out)
        self.assertIn("Found 1 exit(s)", out)


class TestFilenameCheck(unittest.TestCase):

    def test_valid_filename(self):
        self.assertTrue(maze_solver.valid_filename("maze.txt"))
        self.assertTrue(maze_solver.valid_filename("MAZE.TXT"))
        self.assertTrue(maze_solver.valid_filename("maze.csv"))
        self.assertTrue(maze_solver.valid_filename("paths/maze.json"))
        self.assertFalse(maze_solver.valid_filename(".txt"))
        self.assertFalse(maze_solver.valid_filename("maze.doc"))
        self.assertFalse(maze_solver.valid_filename(""))


if __name__ == '__main__':
    unittest.main()
