from typing import Optional

from PyQt6 import QtCore, QtGui

from basic_csv.editor import TableEditor
from basic_csv.theme import theme_palette


class CSVTableModel(QtCore.QAbstractTableModel):
    def __init__(
        self,
        editor: TableEditor,
        parent: Optional[QtCore.QObject] = None,
        theme: str = "light",
    ) -> None:
        super().__init__(parent)
        self._editor = editor
        self._start = 0
        self._in_set_data = False
        self._header_colors = theme_palette(theme)
        self._editor.add_listener(self._on_editor_changed)

    @property
    def editor(self) -> TableEditor:
        return self._editor

    @property
    def page_start(self) -> int:
        return self._start

    def detach(self) -> None:
        self._editor.remove_listener(self._on_editor_changed)

    def set_theme(self, name: str) -> None:
        self._header_colors = theme_palette(name)
        self._emit_header_row_changed()

    def set_page(self, start_row: int) -> None:
        start, _ = self._editor.visible_range(start_row)
        if start == self._start:
            return
        self.beginResetModel()
        self._start = start
        self.endResetModel()

    def grid_position(self, index: QtCore.QModelIndex) -> tuple[int, int]:
        return self._start + index.row(), index.column()

    def model_index(self, row: int, col: int) -> QtCore.QModelIndex:
        return self.index(row - self._start, col)

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        start, stop = self._editor.visible_range(self._start)
        return stop - start

    def columnCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return self._editor.grid.column_count

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None
        grid = self._editor.grid
        row, col = self.grid_position(index)
        if role in (QtCore.Qt.ItemDataRole.DisplayRole, QtCore.Qt.ItemDataRole.EditRole):
            if grid.contains(row, col):
                return grid.cell(row, col)
            return ""
        if grid.is_header_row(row):
            if role == QtCore.Qt.ItemDataRole.FontRole:
                font = QtGui.QFont()
                font.setBold(True)
                return font
            if role == QtCore.Qt.ItemDataRole.BackgroundRole:
                return QtGui.QBrush(QtGui.QColor(self._header_colors["header"]))
            if role == QtCore.Qt.ItemDataRole.ForegroundRole:
                return QtGui.QBrush(QtGui.QColor(self._header_colors["header_text"]))
        return None

    def setData(self, index: QtCore.QModelIndex, value, role: int = QtCore.Qt.ItemDataRole.EditRole) -> bool:
        if not index.isValid() or role != QtCore.Qt.ItemDataRole.EditRole:
            return False
        row, col = self.grid_position(index)
        if not self._editor.grid.contains(row, col):
            return False
        self._in_set_data = True
        try:
            self._editor.on_cell_edited((row, col), str(value))
        finally:
            self._in_set_data = False
        self.dataChanged.emit(index, index, [role])
        return True

    def flags(self, index: QtCore.QModelIndex) -> QtCore.Qt.ItemFlag:
        if not index.isValid():
            return QtCore.Qt.ItemFlag.NoItemFlags
        row, col = self.grid_position(index)
        if not self._editor.grid.contains(row, col):
            return QtCore.Qt.ItemFlag.ItemIsEnabled
        return (
            QtCore.Qt.ItemFlag.ItemIsSelectable
            | QtCore.Qt.ItemFlag.ItemIsEnabled
            | QtCore.Qt.ItemFlag.ItemIsEditable
        )

    def headerData(self, section: int, orientation: QtCore.Qt.Orientation, role: int = QtCore.Qt.ItemDataRole.DisplayRole):
        if role != QtCore.Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == QtCore.Qt.Orientation.Horizontal:
            return f"Column {section + 1}"
        return str(self._start + section + 1)

    def _on_editor_changed(self, _: TableEditor) -> None:
        if self._in_set_data:
            return
        self.beginResetModel()
        self._start, _stop = self._editor.visible_range(self._start)
        self.endResetModel()

    def _emit_header_row_changed(self) -> None:
        if self.rowCount() <= 0 or self.columnCount() <= 0:
            return
        start = self.index(0, 0)
        end = self.index(0, self.columnCount() - 1)
        self.dataChanged.emit(start, end)
