import logging
import os
from typing import Callable, List, Optional, Tuple

from basic_csv.grid import Grid, delimiter_for_path
from basic_csv.history import History
from basic_csv.navigation import Position, is_navigation_key, next_position

logger = logging.getLogger(__name__)

MAX_RENDER_ROWS = 1000

TextReader = Callable[[str], str]
TextWriter = Callable[[str, str], None]
Listener = Callable[["TableEditor"], None]


class TableEditor:
    """Editing session for one delimiter-separated file.

    The editor never touches the filesystem itself: the host hands in the
    file text on construction and a writer callable on save.
    """

    def __init__(
        self,
        path: str,
        text: str,
        history_limit: Optional[int] = None,
        max_render_rows: int = MAX_RENDER_ROWS,
    ) -> None:
        self._path = path
        self._grid = Grid.from_text(text, delimiter_for_path(path))
        self._history = History(history_limit)
        self._modified = False
        self._max_render_rows = max(1, max_render_rows)
        self._listeners: List[Listener] = []
        logger.info(
            "Loaded %s: %d rows, %d columns.",
            path,
            self._grid.row_count,
            self._grid.column_count,
        )

    @property
    def path(self) -> str:
        return self._path

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def history(self) -> History:
        return self._history

    @property
    def max_render_rows(self) -> int:
        return self._max_render_rows

    def get_title(self) -> str:
        return os.path.basename(self._path)

    def get_uri(self) -> str:
        return self._path

    def serialize(self) -> dict:
        return {"deserializer": "TableEditor", "filePath": self._path}

    def is_modified(self) -> bool:
        return self._modified

    def should_prompt_to_save(self) -> bool:
        return self.is_modified()

    def set_modified(self, state: bool = True) -> None:
        self._modified = state

    def is_large(self) -> bool:
        return self._grid.row_count > self._max_render_rows

    def visible_range(self, start_row: int = 0) -> Tuple[int, int]:
        total = self._grid.row_count
        start = max(0, min(start_row, total))
        return start, min(start + self._max_render_rows, total)

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def on_cell_focused(self, pos: Position) -> None:
        logger.debug("Cell %s focused.", pos)
        self._history.snapshot(self._grid)

    def on_cell_edited(self, pos: Position, value: str) -> None:
        row, col = pos
        self._grid.set_cell(row, col, value)
        self.set_modified(True)
        self._notify()

    def on_key_pressed(self, key: str, pos: Position) -> Optional[Position]:
        if not is_navigation_key(key):
            return None
        row, col = pos
        target = next_position(key, row, col)
        if not self._grid.contains(*target):
            return pos
        logger.debug("Moved %s -> %s on %s.", pos, target, key)
        return target

    def insert_row(self) -> None:
        self._history.snapshot(self._grid)
        self._grid.insert_row()
        self.set_modified(True)
        self._notify()

    def insert_column(self) -> None:
        self._history.snapshot(self._grid)
        self._grid.insert_column()
        self.set_modified(True)
        self._notify()

    def toggle_header(self) -> None:
        self._grid.toggle_header()
        self._notify()

    def undo(self) -> bool:
        if not self._history.undo(self._grid):
            return False
        self.set_modified(True)
        self._notify()
        return True

    def redo(self) -> bool:
        if not self._history.redo(self._grid):
            return False
        self.set_modified(True)
        self._notify()
        return True

    def serialize_data(self) -> str:
        return self._grid.to_text()

    def save(self, writer: TextWriter) -> None:
        writer(self._path, self.serialize_data())
        logger.info("Saved %s.", self._path)
        self.set_modified(False)
        self._notify()

    def save_as(self, path: str, writer: TextWriter) -> None:
        previous = self._path
        self._path = path
        try:
            self.save(writer)
        except Exception:
            self._path = previous
            raise
