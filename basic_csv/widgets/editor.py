import logging
from typing import Optional

from PyQt6 import QtCore, QtGui, QtWidgets

from basic_csv import navigation
from basic_csv.editor import TableEditor
from basic_csv.models import CSVTableModel

logger = logging.getLogger(__name__)

KEY_NAMES = {
    QtCore.Qt.Key.Key_Right.value: navigation.ARROW_RIGHT,
    QtCore.Qt.Key.Key_Left.value: navigation.ARROW_LEFT,
    QtCore.Qt.Key.Key_Down.value: navigation.ARROW_DOWN,
    QtCore.Qt.Key.Key_Up.value: navigation.ARROW_UP,
    QtCore.Qt.Key.Key_Return.value: navigation.ENTER,
    QtCore.Qt.Key.Key_Enter.value: navigation.ENTER,
}


class EditorWidget(QtWidgets.QWidget):
    document_changed = QtCore.pyqtSignal(str)

    def __init__(
        self,
        editor: TableEditor,
        parent: Optional[QtWidgets.QWidget] = None,
        theme: str = "light",
    ) -> None:
        super().__init__(parent)
        self._editor = editor
        self._restoring_cursor = False
        self._last_pos: Optional[tuple[int, int]] = None

        self._insert_row_button = QtWidgets.QToolButton(self)
        self._insert_row_button.setText("Insert Row")
        self._insert_col_button = QtWidgets.QToolButton(self)
        self._insert_col_button.setText("Insert Column")
        self._header_button = QtWidgets.QToolButton(self)
        self._header_button.setText("Header")
        self._header_button.setCheckable(True)
        self._header_button.setChecked(editor.grid.has_header)
        self._prev_page_button = QtWidgets.QToolButton(self)
        self._prev_page_button.setText("Previous")
        self._next_page_button = QtWidgets.QToolButton(self)
        self._next_page_button.setText("Next")

        toolbar = QtWidgets.QHBoxLayout()
        toolbar.setContentsMargins(0, 0, 0, 0)
        toolbar.addWidget(self._insert_row_button)
        toolbar.addWidget(self._insert_col_button)
        toolbar.addWidget(self._header_button)
        toolbar.addStretch(1)
        toolbar.addWidget(self._prev_page_button)
        toolbar.addWidget(self._next_page_button)

        self._notice = QtWidgets.QLabel(self)
        self._notice.setObjectName("tableNotice")

        self._table_view = QtWidgets.QTableView(self)
        self._table_view.setAlternatingRowColors(True)
        self._table_view.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectionBehavior.SelectItems)
        self._table_view.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        self._table_view.setEditTriggers(
            QtWidgets.QAbstractItemView.EditTrigger.DoubleClicked
            | QtWidgets.QAbstractItemView.EditTrigger.AnyKeyPressed
            | QtWidgets.QAbstractItemView.EditTrigger.EditKeyPressed
        )
        self._table_view.horizontalHeader().setStretchLastSection(True)
        self._table_view.installEventFilter(self)

        layout = QtWidgets.QVBoxLayout(self)
        layout.addLayout(toolbar)
        layout.addWidget(self._notice)
        layout.addWidget(self._table_view)

        self._model = CSVTableModel(editor, self, theme=theme)
        self._table_view.setModel(self._model)
        self._table_view.selectionModel().currentChanged.connect(self._on_current_cell_changed)
        self._model.modelAboutToBeReset.connect(self._remember_cursor)
        self._model.modelReset.connect(self._restore_cursor)

        self._insert_row_button.clicked.connect(self.insert_row)
        self._insert_col_button.clicked.connect(self.insert_column)
        self._header_button.toggled.connect(self._on_header_toggled)
        self._prev_page_button.clicked.connect(lambda: self._turn_page(-1))
        self._next_page_button.clicked.connect(lambda: self._turn_page(1))
        self._editor.add_listener(self._on_editor_changed)
        self._update_page_controls()

    @property
    def editor(self) -> TableEditor:
        return self._editor

    @property
    def model(self) -> CSVTableModel:
        return self._model

    @property
    def table_view(self) -> QtWidgets.QTableView:
        return self._table_view

    def is_dirty(self) -> bool:
        return self._editor.is_modified()

    def set_theme(self, name: str) -> None:
        self._model.set_theme(name)

    def insert_row(self) -> None:
        self._editor.insert_row()

    def insert_column(self) -> None:
        self._editor.insert_column()

    def toggle_header(self) -> None:
        self._header_button.toggle()

    def undo(self) -> None:
        self._editor.undo()

    def redo(self) -> None:
        self._editor.redo()

    def destroy_editor(self) -> None:
        self._editor.remove_listener(self._on_editor_changed)
        self._model.detach()
        self.deleteLater()

    def select_cell(self, row: int, col: int) -> None:
        index = self._model.model_index(row, col)
        if not index.isValid():
            return
        self._table_view.selectionModel().setCurrentIndex(
            index, QtCore.QItemSelectionModel.SelectionFlag.ClearAndSelect
        )
        self._table_view.scrollTo(index)

    def _on_header_toggled(self, checked: bool) -> None:
        if checked != self._editor.grid.has_header:
            self._editor.toggle_header()

    def _on_editor_changed(self, editor: TableEditor) -> None:
        self._update_page_controls()
        self.document_changed.emit(editor.path)

    def _update_page_controls(self) -> None:
        large = self._editor.is_large()
        limit = self._editor.max_render_rows
        start, stop = self._editor.visible_range(self._model.page_start)
        self._notice.setVisible(large)
        if large:
            self._notice.setText(
                f"Large file: showing {limit} rows at a time "
                f"(rows {start + 1}-{stop} of {self._editor.grid.row_count})"
            )
        self._prev_page_button.setVisible(large)
        self._next_page_button.setVisible(large)
        self._prev_page_button.setEnabled(start > 0)
        self._next_page_button.setEnabled(stop < self._editor.grid.row_count)

    def _turn_page(self, step: int) -> None:
        limit = self._editor.max_render_rows
        self._model.set_page(max(0, self._model.page_start + step * limit))
        logger.debug("Showing rows from %d of %s.", self._model.page_start, self._editor.path)
        self._update_page_controls()

    def _on_current_cell_changed(
        self, current: QtCore.QModelIndex, _: QtCore.QModelIndex
    ) -> None:
        if self._restoring_cursor or not current.isValid():
            return
        self._editor.on_cell_focused(self._model.grid_position(current))

    def _remember_cursor(self) -> None:
        current = self._table_view.selectionModel().currentIndex()
        self._last_pos = self._model.grid_position(current) if current.isValid() else None

    def _restore_cursor(self) -> None:
        if self._last_pos is None:
            return
        index = self._model.model_index(*self._last_pos)
        if not index.isValid():
            return
        self._restoring_cursor = True
        try:
            self._table_view.selectionModel().setCurrentIndex(
                index, QtCore.QItemSelectionModel.SelectionFlag.ClearAndSelect
            )
        finally:
            self._restoring_cursor = False

    def _handle_key(self, event: QtGui.QKeyEvent) -> bool:
        key = KEY_NAMES.get(event.key())
        current = self._table_view.selectionModel().currentIndex()
        if key is None or not current.isValid():
            return False
        # Modified arrows keep Qt's selection handling.
        if event.modifiers() & ~QtCore.Qt.KeyboardModifier.KeypadModifier:
            return False
        pos = self._model.grid_position(current)
        target = self._editor.on_key_pressed(key, pos)
        if target is None:
            return False
        if target != pos:
            start, stop = self._editor.visible_range(self._model.page_start)
            if not start <= target[0] < stop:
                self._model.set_page(target[0] // self._editor.max_render_rows * self._editor.max_render_rows)
                self._update_page_controls()
            self.select_cell(*target)
        return True

    def eventFilter(self, obj: QtCore.QObject, event: QtCore.QEvent) -> bool:
        if obj is self._table_view and event.type() == QtCore.QEvent.Type.KeyPress:
            if self._table_view.state() != QtWidgets.QAbstractItemView.State.EditingState:
                if self._handle_key(event):
                    return True
        return super().eventFilter(obj, event)
