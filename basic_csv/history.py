import logging
from typing import List, Optional

from basic_csv.grid import Grid

logger = logging.getLogger(__name__)

Snapshot = List[List[str]]


class History:
    def __init__(self, limit: Optional[int] = None) -> None:
        self._undo_stack: List[Snapshot] = []
        self._redo_stack: List[Snapshot] = []
        self._limit = limit if limit and limit > 0 else None

    @property
    def limit(self) -> Optional[int]:
        return self._limit

    def snapshot(self, grid: Grid) -> None:
        self._undo_stack.append(grid.clone_rows())
        if self._limit is not None and len(self._undo_stack) > self._limit:
            self._undo_stack.pop(0)
        self._redo_stack.clear()
        logger.debug("Snapshot taken (%d undo levels).", len(self._undo_stack))

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def undo(self, grid: Grid) -> bool:
        if not self._undo_stack:
            return False
        self._redo_stack.append(grid.clone_rows())
        grid.replace_rows(self._undo_stack.pop())
        return True

    def redo(self, grid: Grid) -> bool:
        if not self._redo_stack:
            return False
        self._undo_stack.append(grid.clone_rows())
        grid.replace_rows(self._redo_stack.pop())
        return True

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()

    def __len__(self) -> int:
        return len(self._undo_stack)
