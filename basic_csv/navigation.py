from typing import Optional, Tuple

Position = Tuple[int, int]

ARROW_RIGHT = "ArrowRight"
ARROW_LEFT = "ArrowLeft"
ARROW_DOWN = "ArrowDown"
ARROW_UP = "ArrowUp"
ENTER = "Enter"

_OFFSETS: dict[str, Position] = {
    ARROW_RIGHT: (0, 1),
    ARROW_LEFT: (0, -1),
    ARROW_DOWN: (1, 0),
    ARROW_UP: (-1, 0),
    ENTER: (1, 0),
}


def is_navigation_key(key: str) -> bool:
    return key in _OFFSETS


def next_position(
    key: str,
    row: int,
    col: int,
    row_count: Optional[int] = None,
    col_count: Optional[int] = None,
) -> Position:
    offset = _OFFSETS.get(key)
    if offset is None:
        return row, col
    target_row = row + offset[0]
    target_col = col + offset[1]
    if target_row < 0 or target_col < 0:
        return row, col
    if row_count is not None and target_row >= row_count:
        return row, col
    if col_count is not None and target_col >= col_count:
        return row, col
    return target_row, target_col
