import unittest

from basic_csv.grid import Grid
from basic_csv.history import History


class HistoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = Grid([["a", "b"], ["c", "d"]])
        self.history = History()

    def test_empty_stacks_are_no_ops(self) -> None:
        self.assertFalse(self.history.undo(self.grid))
        self.assertFalse(self.history.redo(self.grid))
        self.assertEqual(self.grid.rows, [["a", "b"], ["c", "d"]])

    def test_undo_then_redo(self) -> None:
        self.history.snapshot(self.grid)
        self.grid.set_cell(0, 0, "x")
        self.assertTrue(self.history.undo(self.grid))
        self.assertEqual(self.grid.rows, [["a", "b"], ["c", "d"]])
        self.assertTrue(self.history.redo(self.grid))
        self.assertEqual(self.grid.rows, [["x", "b"], ["c", "d"]])

    def test_snapshot_then_undo_restores_same_grid(self) -> None:
        self.history.snapshot(self.grid)
        self.history.undo(self.grid)
        self.assertEqual(self.grid.rows, [["a", "b"], ["c", "d"]])

    def test_two_levels(self) -> None:
        self.history.snapshot(self.grid)
        self.grid.insert_row()
        self.history.snapshot(self.grid)
        self.grid.insert_column()
        self.history.undo(self.grid)
        self.history.undo(self.grid)
        self.assertEqual(self.grid.rows, [["a", "b"], ["c", "d"]])
        self.assertFalse(self.history.can_undo())
        self.assertTrue(self.history.can_redo())

    def test_snapshot_discards_redo(self) -> None:
        self.history.snapshot(self.grid)
        self.grid.set_cell(0, 0, "x")
        self.history.undo(self.grid)
        self.history.snapshot(self.grid)
        self.assertFalse(self.history.can_redo())
        self.assertFalse(self.history.redo(self.grid))

    def test_snapshots_do_not_alias_live_rows(self) -> None:
        self.history.snapshot(self.grid)
        self.history.undo(self.grid)
        self.grid.set_cell(0, 0, "x")
        self.history.redo(self.grid)
        self.history.undo(self.grid)
        self.assertEqual(self.grid.cell(0, 0), "x")

    def test_limit_evicts_oldest(self) -> None:
        history = History(limit=2)
        for value in ("1", "2", "3"):
            history.snapshot(self.grid)
            self.grid.set_cell(0, 0, value)
        self.assertEqual(len(history), 2)
        history.undo(self.grid)
        history.undo(self.grid)
        self.assertFalse(history.undo(self.grid))
        self.assertEqual(self.grid.cell(0, 0), "1")

    def test_zero_limit_is_unbounded(self) -> None:
        history = History(limit=0)
        self.assertIsNone(history.limit)
        for _ in range(50):
            history.snapshot(self.grid)
        self.assertEqual(len(history), 50)

    def test_clear(self) -> None:
        self.history.snapshot(self.grid)
        self.history.undo(self.grid)
        self.history.clear()
        self.assertFalse(self.history.can_undo())
        self.assertFalse(self.history.can_redo())


if __name__ == "__main__":
    unittest.main()
