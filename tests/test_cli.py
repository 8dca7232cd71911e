import io
import random
import sys
import unittest
from contextlib import redirect_stdout
from unittest import mock

from game import MAX_LEVEL, WON, Board, Session, Tile, deal_board, tile_id
from onet_core.cli import _play, describe_board, main, parse_pair


def make_board(rows):
    h = len(rows)
    w = len(rows[0])
    tiles = []
    for r in range(h + 2):
        for c in range(w + 2):
            inner = 0 < r <= h and 0 < c <= w
            if inner:
                tiles.append(Tile(id=tile_id(r, c), type=rows[r - 1][c - 1], row=r, col=c))
            else:
                tiles.append(Tile(id=tile_id(r, c), type=0, row=r, col=c, empty=True))
    return Board(width=w + 2, height=h + 2, tiles=tuple(tiles))


class TestCli(unittest.TestCase):
    def test_given_pair_text_when_parsing_then_coordinates_or_none(self):
        self.assertEqual(parse_pair("1,2 3,4"), ((1, 2), (3, 4)))
        self.assertEqual(parse_pair("1 2 3 4"), ((1, 2), (3, 4)))
        self.assertIsNone(parse_pair("1,2"))
        self.assertIsNone(parse_pair("a,b c,d"))

    def test_given_board_when_describing_then_hint_and_paths_listed(self):
        board = deal_board(4, 4, 2, seed=3)
        lines = describe_board(board, show_paths=True)
        self.assertIn("Active tiles: 16", lines[1])
        self.assertTrue(lines[2].startswith("Hint:") or lines[2].startswith("No moves"))

    def test_given_seed_when_running_without_play_then_board_printed(self):
        buf = io.StringIO()
        with mock.patch.object(sys, "argv", ["onet", "--seed", "1", "--level", "2", "--stats"]):
            with redirect_stdout(buf):
                main()
        out = buf.getvalue()
        self.assertIn("Level 2: 10x10, 16 piece types, 240s", out)
        self.assertIn("Active tiles: 100", out)
        self.assertIn("type", out)

    def test_given_unknown_level_when_running_then_exits_with_usage_error(self):
        with mock.patch.object(sys, "argv", ["onet", "--level", "9"]):
            with redirect_stdout(io.StringIO()), mock.patch("sys.stderr", io.StringIO()):
                with self.assertRaises(SystemExit):
                    main()

    def test_given_last_pair_on_final_level_when_playing_then_loop_ends_on_win(self):
        state = Session(board=make_board([[4, 4]]), level=MAX_LEVEL, time_left=30)
        buf = io.StringIO()
        with mock.patch("builtins.input", side_effect=["1,1 1,2"]), redirect_stdout(buf):
            final = _play(state, random.Random(0), show_paths=False, max_attempts=10)
        self.assertEqual(final.status, WON)
        self.assertTrue(final.is_terminal())
        self.assertIn("Game over (won)", buf.getvalue())


if __name__ == "__main__":
    unittest.main(verbosity=2)
