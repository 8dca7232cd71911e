import random
import unittest
from collections import Counter

from game import (
    Board,
    Tile,
    tile_id,
    board_stats,
    can_connect,
    deal_board,
    fisher_yates,
    get_hint,
    needs_shuffle,
    shuffle_board_types,
    shuffle_until_solvable,
)


def make_board(rows):
    h = len(rows)
    w = len(rows[0])
    tiles = []
    for r in range(h + 2):
        for c in range(w + 2):
            inner = 0 < r <= h and 0 < c <= w
            value = rows[r - 1][c - 1] if inner else None
            if value is None:
                tiles.append(Tile(id=tile_id(r, c), type=0, row=r, col=c, empty=True, matched=inner))
            else:
                tiles.append(Tile(id=tile_id(r, c), type=value, row=r, col=c))
    return Board(width=w + 2, height=h + 2, tiles=tuple(tiles))


def active_types(board):
    return Counter(t.type for t in board.active_tiles())


def active_positions(board):
    return {t.pos for t in board.active_tiles()}


class TestFisherYates(unittest.TestCase):
    def test_given_items_when_permuting_then_same_multiset_and_input_untouched(self):
        items = [1, 1, 2, 3, 3, 3, 4]
        out = fisher_yates(items, random.Random(5))
        self.assertEqual(sorted(out), sorted(items))
        self.assertEqual(items, [1, 1, 2, 3, 3, 3, 4])

    def test_given_many_runs_when_permuting_three_items_then_every_order_appears(self):
        rng = random.Random(11)
        seen = {tuple(fisher_yates(['a', 'b', 'c'], rng)) for _ in range(300)}
        self.assertEqual(len(seen), 6)


class TestShuffle(unittest.TestCase):
    def test_given_dead_packed_board_when_checking_then_needs_shuffle_until_reshuffled(self):
        board = make_board([
            [1, 2],
            [2, 1],
        ])
        self.assertTrue(needs_shuffle(board))
        self.assertIsNone(get_hint(board))
        fixed = shuffle_until_solvable(board, rng=random.Random(0))
        self.assertFalse(needs_shuffle(fixed))
        self.assertEqual(active_types(fixed), active_types(board))
        self.assertEqual(active_positions(fixed), active_positions(board))

    def test_given_partially_cleared_board_when_shuffling_then_removed_and_border_cells_untouched(self):
        board = make_board([
            [1, None, 2, 3],
            [3, 2, None, 1],
            [4, 4, None, None],
        ])
        selected = board.with_tiles({(1, 1): Tile(id=tile_id(1, 1), type=1, row=1, col=1, selected=True)})
        out = shuffle_until_solvable(selected, rng=random.Random(7))
        self.assertEqual(active_types(out), active_types(board))
        self.assertEqual(active_positions(out), active_positions(board))
        self.assertFalse(any(t.selected for t in out.tiles))
        for t in board.tiles:
            if not t.active:
                self.assertEqual(out.at(t.row, t.col), t)
        self.assertFalse(needs_shuffle(out))

    def test_given_single_pass_when_shuffling_types_then_ids_and_positions_kept(self):
        board = deal_board(4, 4, 3, seed=2)
        out = shuffle_board_types(board, random.Random(1))
        for before, after in zip(board.tiles, out.tiles):
            self.assertEqual((before.id, before.row, before.col, before.empty), (after.id, after.row, after.col, after.empty))
        self.assertEqual(active_types(out), active_types(board))

    def test_given_unpairable_board_when_attempts_exhausted_then_last_attempt_returned_with_warning(self):
        board = make_board([
            [1, 2],
            [3, 4],
        ])
        with self.assertLogs('onet_core.shuffle', level='WARNING') as logs:
            out = shuffle_until_solvable(board, max_attempts=3, rng=random.Random(0))
        self.assertTrue(needs_shuffle(out))
        self.assertEqual(active_types(out), active_types(board))
        self.assertIn('3 shuffle attempts', logs.output[0])

    def test_given_random_boards_when_needs_shuffle_then_matches_exhaustive_scan(self):
        for seed in range(6):
            board = deal_board(4, 4, 6, seed=seed)
            active = board.active_tiles()
            any_pair = any(
                can_connect(board, a, b).connected
                for i, a in enumerate(active)
                for b in active[i + 1:]
                if a.type == b.type
            )
            self.assertEqual(needs_shuffle(board), not any_pair)


class TestHintAndStats(unittest.TestCase):
    def test_given_board_with_moves_when_asking_hint_then_connectable_pair(self):
        board = make_board([
            [1, 2],
            [1, 2],
        ])
        pair = get_hint(board)
        self.assertIsNotNone(pair)
        assert pair is not None
        self.assertEqual((pair.first.pos, pair.second.pos), ((1, 1), (2, 1)))
        self.assertTrue(can_connect(board, pair.first, pair.second).connected)

    def test_given_partially_cleared_board_when_computing_stats_then_counts_add_up(self):
        board = make_board([
            [1, None, 2, 2],
            [None, 1, 3, 3],
        ])
        stats = board_stats(board)
        self.assertEqual(stats.total_tiles, 6 * 4)
        self.assertEqual(stats.active_tiles, 6)
        self.assertEqual(stats.matched_tiles, 2)
        self.assertEqual(stats.empty_tiles, 24 - 6)
        self.assertEqual(stats.type_distribution, {1: 2, 2: 2, 3: 2})


if __name__ == '__main__':
    unittest.main(verbosity=2)
