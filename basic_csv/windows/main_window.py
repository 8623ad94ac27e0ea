import json
import logging
import os
from typing import Optional, Union

from PyQt6 import QtCore, QtGui, QtWidgets

from basic_csv.config import EditorSettings, load_settings, open_settings, save_settings
from basic_csv.editor import TableEditor
from basic_csv.grid import delimiter_for_path
from basic_csv.openers import OpenerRegistry, install
from basic_csv.theme import apply_theme
from basic_csv.widgets.editor import EditorWidget
from basic_csv.widgets.text_view import PlainTextView

logger = logging.getLogger(__name__)

DocumentWidget = Union[EditorWidget, PlainTextView]


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", newline="") as handle:
        return handle.read()


def write_text(path: str, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(text)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        settings: Optional[QtCore.QSettings] = None,
        registry: Optional[OpenerRegistry] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("BasicCsv")
        self.resize(1100, 700)
        self._settings = settings if settings is not None else open_settings()
        self._config: EditorSettings = load_settings(self._settings)
        self._registry = registry if registry is not None else OpenerRegistry()
        self._registration = install(
            self._registry,
            read_text,
            os.path.getsize,
            self._open_fallback,
            max_file_size=self._config.max_file_size,
            max_render_rows=self._config.max_render_rows,
            history_limit=self._config.history_limit_or_none(),
        )

        self._tabs = QtWidgets.QTabWidget(self)
        self._tabs.setTabsClosable(True)
        self._tabs.tabCloseRequested.connect(self.close_tab)
        self._tabs.currentChanged.connect(self._on_tab_changed)
        self.setCentralWidget(self._tabs)
        self._status_bar = self.statusBar()
        self._status_bar.showMessage("Ready")

        self._open_documents: dict[str, DocumentWidget] = {}
        self._build_actions()
        self._apply_theme(self._config.theme)
        self._restore_session_state()

    @property
    def registry(self) -> OpenerRegistry:
        return self._registry

    def _build_actions(self) -> None:
        open_action = QtGui.QAction("Open File...", self)
        open_action.setShortcut(QtGui.QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.open_file_dialog)

        save_action = QtGui.QAction("Save", self)
        save_action.setShortcut(QtGui.QKeySequence.StandardKey.Save)
        save_action.triggered.connect(self.save_current)

        save_as_action = QtGui.QAction("Save As...", self)
        save_as_action.setShortcut(QtGui.QKeySequence.StandardKey.SaveAs)
        save_as_action.triggered.connect(self.save_as_current)

        close_action = QtGui.QAction("Close File", self)
        close_action.setShortcut(QtGui.QKeySequence.StandardKey.Close)
        close_action.triggered.connect(self.close_current_tab)

        undo_action = QtGui.QAction("Undo", self)
        undo_action.setShortcut(QtGui.QKeySequence.StandardKey.Undo)
        undo_action.triggered.connect(lambda: self._apply_to_current("undo"))

        redo_action = QtGui.QAction("Redo", self)
        redo_action.setShortcut(QtGui.QKeySequence.StandardKey.Redo)
        redo_action.triggered.connect(lambda: self._apply_to_current("redo"))

        insert_row_action = QtGui.QAction("Insert Row", self)
        insert_row_action.setShortcut(QtGui.QKeySequence("Ctrl+Shift+R"))
        insert_row_action.triggered.connect(lambda: self._apply_to_current("insert_row"))

        insert_col_action = QtGui.QAction("Insert Column", self)
        insert_col_action.setShortcut(QtGui.QKeySequence("Ctrl+Shift+C"))
        insert_col_action.triggered.connect(lambda: self._apply_to_current("insert_column"))

        header_action = QtGui.QAction("Toggle Header Row", self)
        header_action.setShortcut(QtGui.QKeySequence("Ctrl+Shift+H"))
        header_action.triggered.connect(lambda: self._apply_to_current("toggle_header"))

        file_menu = self.menuBar().addMenu("File")
        file_menu.addAction(open_action)
        file_menu.addSeparator()
        file_menu.addAction(save_action)
        file_menu.addAction(save_as_action)
        file_menu.addSeparator()
        file_menu.addAction(close_action)

        edit_menu = self.menuBar().addMenu("Edit")
        edit_menu.addAction(undo_action)
        edit_menu.addAction(redo_action)
        edit_menu.addSeparator()
        edit_menu.addAction(insert_row_action)
        edit_menu.addAction(insert_col_action)
        edit_menu.addAction(header_action)

        view_menu = self.menuBar().addMenu("View")
        light_theme_action = QtGui.QAction("Light Theme", self)
        light_theme_action.setCheckable(True)
        dark_theme_action = QtGui.QAction("Dark Theme", self)
        dark_theme_action.setCheckable(True)
        theme_group = QtGui.QActionGroup(self)
        theme_group.setExclusive(True)
        theme_group.addAction(light_theme_action)
        theme_group.addAction(dark_theme_action)
        light_theme_action.triggered.connect(lambda: self._set_theme("light"))
        dark_theme_action.triggered.connect(lambda: self._set_theme("dark"))
        if self._config.theme == "dark":
            dark_theme_action.setChecked(True)
        else:
            light_theme_action.setChecked(True)
        view_menu.addAction(light_theme_action)
        view_menu.addAction(dark_theme_action)

        # Table view eats shortcuts otherwise.
        for action in (
            open_action,
            save_action,
            save_as_action,
            close_action,
            undo_action,
            redo_action,
            insert_row_action,
            insert_col_action,
            header_action,
        ):
            action.setShortcutContext(QtCore.Qt.ShortcutContext.ApplicationShortcut)
            self.addAction(action)

    def _set_theme(self, name: str) -> None:
        if name == self._config.theme:
            return
        self._config.theme = name
        save_settings(self._settings, self._config)
        self._apply_theme(name)

    def _apply_theme(self, name: str) -> None:
        app = QtWidgets.QApplication.instance()
        if isinstance(app, QtWidgets.QApplication):
            apply_theme(app, name)
        for widget in self._open_documents.values():
            if isinstance(widget, EditorWidget):
                widget.set_theme(name)

    def _apply_to_current(self, method_name: str) -> None:
        editor = self._current_editor()
        if editor and hasattr(editor, method_name):
            getattr(editor, method_name)()

    def _current_editor(self) -> Optional[EditorWidget]:
        widget = self._tabs.currentWidget()
        if isinstance(widget, EditorWidget):
            return widget
        return None

    def _open_fallback(self, path: str) -> PlainTextView:
        return PlainTextView(path, read_text(path), self)

    def open_file_dialog(self) -> None:
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self,
            "Open CSV File",
            QtCore.QDir.currentPath(),
            "Delimited Files (*.csv *.tsv)",
        )
        if path:
            self.open_file(path)

    def open_file(self, path: str) -> Optional[DocumentWidget]:
        if path in self._open_documents:
            widget = self._open_documents[path]
            self._show_tab(widget)
            return widget
        try:
            result = self._registry.open(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not open %s: %s", path, exc)
            QtWidgets.QMessageBox.warning(self, "Open failed", str(exc))
            return None
        if result is None:
            logger.warning("No opener registered for %s.", path)
            QtWidgets.QMessageBox.warning(self, "Open failed", f"Unsupported file:\n{path}")
            return None

        if isinstance(result, TableEditor):
            widget: DocumentWidget = EditorWidget(result, self, theme=self._config.theme)
            widget.document_changed.connect(self._on_document_changed)
        else:
            widget = result
            self._status_bar.showMessage(f"{os.path.basename(path)} is too large for the grid editor")
        self._open_documents[path] = widget
        self._show_tab(widget)
        self._persist_session_state()
        return widget

    def save_current(self) -> bool:
        editor = self._current_editor()
        if not editor:
            return False
        return self._save_editor(editor, None)

    def save_as_current(self) -> bool:
        editor = self._current_editor()
        if not editor:
            return False
        if editor.editor.grid.delimiter == "\t":
            file_filter = "Tab-Separated Files (*.tsv)"
        else:
            file_filter = "Comma-Separated Files (*.csv)"
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self,
            "Save As",
            editor.editor.path,
            file_filter,
        )
        if not path:
            return False
        return self._save_editor(editor, path)

    def _save_editor(self, editor: EditorWidget, new_path: Optional[str]) -> bool:
        table = editor.editor
        old_path = table.path
        if new_path is not None:
            problem = self._save_as_problem(editor, new_path)
            if problem:
                logger.warning("Refusing to save %s as %s: %s", old_path, new_path, problem)
                QtWidgets.QMessageBox.warning(self, "Save failed", problem)
                return False
        try:
            if new_path is None:
                table.save(write_text)
            else:
                table.save_as(new_path, write_text)
        except OSError as exc:
            logger.warning("Could not save %s: %s", new_path or old_path, exc)
            QtWidgets.QMessageBox.warning(self, "Save failed", str(exc))
            return False
        if table.path != old_path:
            self._open_documents.pop(old_path, None)
            self._open_documents[table.path] = editor
            self._persist_session_state()
        self._update_window_title(editor)
        self._status_bar.showMessage(f"Saved: {table.get_title()}")
        return True

    def _save_as_problem(self, editor: EditorWidget, path: str) -> Optional[str]:
        target = os.path.abspath(path)
        for open_path, widget in self._open_documents.items():
            if widget is not editor and os.path.abspath(open_path) == target:
                return f"{os.path.basename(path)} is already open in another tab."
        if delimiter_for_path(path) != editor.editor.grid.delimiter:
            return (
                f"{os.path.basename(path)} needs a different delimiter than "
                f"{editor.editor.get_title()}; choose a matching file extension."
            )
        return None

    def close_current_tab(self) -> None:
        index = self._tabs.currentIndex()
        if index >= 0:
            self.close_tab(index)

    def close_tab(self, index: int) -> None:
        widget = self._tabs.widget(index)
        if not isinstance(widget, (EditorWidget, PlainTextView)):
            return
        if isinstance(widget, EditorWidget):
            if widget.editor.should_prompt_to_save() and not self._confirm_discard(widget):
                return
            path = widget.editor.path
            widget.destroy_editor()
        else:
            path = widget.path
            widget.deleteLater()
        if self._open_documents.get(path) is widget:
            self._open_documents.pop(path)
        self._tabs.removeTab(index)
        if self._tabs.count() == 0:
            self._update_window_title(None)
        self._persist_session_state()

    def _on_document_changed(self, path: str) -> None:
        widget = self._open_documents.get(path)
        if isinstance(widget, EditorWidget):
            self._update_status(widget)
            self._update_window_title(widget)

    def _update_status(self, editor: EditorWidget) -> None:
        grid = editor.editor.grid
        header = "on" if grid.has_header else "off"
        self._status_bar.showMessage(
            f"Rows: {grid.row_count} | Cols: {grid.column_count} | Header: {header}"
        )

    def _update_window_title(self, widget: Optional[DocumentWidget]) -> None:
        if not widget:
            self.setWindowTitle("BasicCsv")
            return
        label = self._tab_label(widget)
        self.setWindowTitle(f"{label} - BasicCsv")
        index = self._tabs.indexOf(widget)
        if index != -1:
            self._tabs.setTabText(index, label)

    def _tab_label(self, widget: DocumentWidget) -> str:
        if isinstance(widget, EditorWidget):
            label = widget.editor.get_title()
        else:
            label = widget.get_title()
        if widget.is_dirty():
            label = f"*{label}"
        return label

    def _show_tab(self, widget: DocumentWidget) -> None:
        index = self._tabs.indexOf(widget)
        if index == -1:
            index = self._tabs.addTab(widget, self._tab_label(widget))
        self._tabs.setCurrentIndex(index)
        self._update_window_title(widget)

    def _on_tab_changed(self, index: int) -> None:
        widget = self._tabs.widget(index)
        if isinstance(widget, (EditorWidget, PlainTextView)):
            self._update_window_title(widget)
            if isinstance(widget, EditorWidget):
                self._update_status(widget)
        else:
            self._update_window_title(None)
        self._persist_session_state()

    def _confirm_discard(self, editor: EditorWidget) -> bool:
        result = QtWidgets.QMessageBox.question(
            self,
            "Unsaved Changes",
            f"Save changes to {editor.editor.get_title()}?",
            QtWidgets.QMessageBox.StandardButton.Save
            | QtWidgets.QMessageBox.StandardButton.Discard
            | QtWidgets.QMessageBox.StandardButton.Cancel,
        )
        if result == QtWidgets.QMessageBox.StandardButton.Save:
            return self._save_editor(editor, None)
        if result == QtWidgets.QMessageBox.StandardButton.Discard:
            return True
        return False

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        for widget in list(self._open_documents.values()):
            if isinstance(widget, EditorWidget) and widget.editor.should_prompt_to_save():
                if not self._confirm_discard(widget):
                    event.ignore()
                    return
        self._persist_session_state()
        self._registration.dispose()
        event.accept()

    def _persist_session_state(self) -> None:
        states = []
        for path, widget in self._open_documents.items():
            if isinstance(widget, EditorWidget):
                states.append(widget.editor.serialize())
            else:
                states.append({"filePath": path})
        self._settings.setValue("session_documents", json.dumps(states))
        current = self._tabs.currentWidget()
        current_path = ""
        if isinstance(current, EditorWidget):
            current_path = current.editor.path
        elif isinstance(current, PlainTextView):
            current_path = current.path
        self._settings.setValue("last_current_file", current_path)

    def _restore_session_state(self) -> None:
        raw = self._settings.value("session_documents", "[]", type=str)
        try:
            states = json.loads(raw or "[]")
        except ValueError:
            logger.warning("Discarding unreadable session state.")
            states = []
        last_current = self._settings.value("last_current_file", "", type=str)
        for state in states if isinstance(states, list) else []:
            path = state.get("filePath") if isinstance(state, dict) else None
            if isinstance(path, str) and os.path.exists(path):
                self.open_file(path)
        if last_current in self._open_documents:
            self._show_tab(self._open_documents[last_current])
