import random
import unittest

from game import (
    Board,
    EngineConfig,
    POOL,
    deal_initial,
    draw_supply,
    supply_size,
)


class TestInitialDeal(unittest.TestCase):
    def test_given_classic_when_dealing_then_pool_in_order_and_cursor_advanced(self):
        board, cursor = deal_initial('classic', random.Random(0), EngineConfig())
        self.assertEqual(len(board), 27)
        self.assertEqual(board.non_empty_count(), 27)
        self.assertEqual(list(board.cells[:19]), list(range(1, 20)))
        self.assertEqual(list(board.cells[19:]), list(range(1, 9)))
        self.assertEqual(cursor, 8)

    def test_given_random_when_dealing_then_same_multiset_as_classic(self):
        classic, _ = deal_initial('classic', random.Random(0), EngineConfig())
        shuffled, cursor = deal_initial('random', random.Random(42), EngineConfig())
        self.assertEqual(len(shuffled), 27)
        self.assertEqual(sorted(shuffled.cells), sorted(classic.cells))
        self.assertEqual(cursor, 8)

    def test_given_seed_when_dealing_random_then_reproducible(self):
        a, _ = deal_initial('random', random.Random(7), EngineConfig())
        b, _ = deal_initial('random', random.Random(7), EngineConfig())
        self.assertEqual(a, b)

    def test_given_chaotic_when_dealing_then_values_one_to_nine(self):
        board, cursor = deal_initial('chaotic', random.Random(3), EngineConfig())
        self.assertEqual(board.non_empty_count(), 27)
        self.assertTrue(all(1 <= v <= 9 for v in board.cells))
        self.assertEqual(cursor, 0)

    def test_given_odd_deal_count_when_dealing_then_padded(self):
        board, _ = deal_initial('classic', random.Random(0), EngineConfig(initial_deal_count=10))
        self.assertEqual(len(board), 18)
        self.assertEqual(board.non_empty_count(), 10)

    def test_given_unknown_mode_when_dealing_then_value_error(self):
        with self.assertRaises(ValueError):
            deal_initial('zen', random.Random(0), EngineConfig())


class TestSupply(unittest.TestCase):
    def test_given_classic_cursor_when_drawing_then_next_value_and_wraps(self):
        board = Board.from_values([1] * 9)
        values, cursor = draw_supply('classic', board, 8, random.Random(0))
        self.assertEqual((values, cursor), ([9], 9))
        values, cursor = draw_supply('classic', board, 18, random.Random(0))
        self.assertEqual((values, cursor), ([19], 0))

    def test_given_random_when_drawing_then_one_pool_value_and_cursor_untouched(self):
        board = Board.from_values([1] * 9)
        values, cursor = draw_supply('random', board, 5, random.Random(1))
        self.assertEqual(len(values), 1)
        self.assertIn(values[0], POOL)
        self.assertEqual(cursor, 5)

    def test_given_chaotic_when_drawing_then_doubles_live_cells(self):
        board = Board.from_values([1, None, 2, None, 3, 4])
        self.assertEqual(supply_size('chaotic', board), 4)
        values, _ = draw_supply('chaotic', board, 0, random.Random(2))
        self.assertEqual(len(values), 4)
        self.assertTrue(all(1 <= v <= 9 for v in values))
        empty = Board.from_values([None] * 9)
        self.assertEqual(supply_size('chaotic', empty), 1)
        self.assertEqual(supply_size('classic', board), 1)


if __name__ == '__main__':
    unittest.main(verbosity=2)
