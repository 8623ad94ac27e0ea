import os
import re
from typing import Iterable, List, Optional, Sequence

_LINE_BREAK = re.compile(r"\r?\n")


class CellIndexError(IndexError):
    def __init__(self, row: int, col: int) -> None:
        super().__init__(f"Cell ({row}, {col}) is outside the grid.")
        self.row = row
        self.col = col


def delimiter_for_path(path: str) -> str:
    _, ext = os.path.splitext(path)
    return "\t" if ext.lower() == ".tsv" else ","


def parse_text(text: str, delimiter: str) -> List[List[str]]:
    # No quoting: a delimiter inside a quoted field splits the field.
    return [line.split(delimiter) for line in _LINE_BREAK.split(text) if line]


def serialize_rows(rows: Iterable[Sequence[object]], delimiter: str) -> str:
    return "\n".join(
        delimiter.join(str(cell).replace("\n", " ") for cell in row) for row in rows
    )


class Grid:
    def __init__(self, rows: Optional[List[List[str]]] = None, delimiter: str = ",") -> None:
        self._rows: List[List[str]] = rows if rows is not None else []
        self._delimiter = delimiter
        self.has_header = False

    @classmethod
    def from_text(cls, text: str, delimiter: str) -> "Grid":
        return cls(parse_text(text, delimiter), delimiter)

    @property
    def rows(self) -> List[List[str]]:
        return self._rows

    @property
    def delimiter(self) -> str:
        return self._delimiter

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self._rows), default=0)

    def row_length(self, row: int) -> int:
        if row < 0 or row >= len(self._rows):
            return 0
        return len(self._rows[row])

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < len(self._rows) and 0 <= col < len(self._rows[row])

    def cell(self, row: int, col: int) -> str:
        if not self.contains(row, col):
            raise CellIndexError(row, col)
        return self._rows[row][col]

    def set_cell(self, row: int, col: int, value: str) -> None:
        if not self.contains(row, col):
            raise CellIndexError(row, col)
        self._rows[row][col] = str(value)

    def insert_row(self) -> None:
        cols = len(self._rows[0]) if self._rows else 0
        self._rows.append([""] * (cols or 1))

    def insert_column(self) -> None:
        for row in self._rows:
            row.append("")

    def toggle_header(self) -> None:
        self.has_header = not self.has_header

    def is_header_row(self, row: int) -> bool:
        return self.has_header and row == 0

    def clone_rows(self) -> List[List[str]]:
        return [list(row) for row in self._rows]

    def replace_rows(self, rows: List[List[str]]) -> None:
        self._rows = rows

    def to_text(self) -> str:
        return serialize_rows(self._rows, self._delimiter)
