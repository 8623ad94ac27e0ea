import os
import tempfile
import unittest
from unittest import mock

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6 import QtCore, QtGui, QtWidgets  # noqa: E402
from PyQt6.QtTest import QTest  # noqa: E402

from basic_csv.editor import TableEditor  # noqa: E402
from basic_csv.widgets.editor import EditorWidget  # noqa: E402
from basic_csv.widgets.text_view import PlainTextView  # noqa: E402
from basic_csv.windows.main_window import MainWindow, read_text  # noqa: E402


class WidgetTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


class EditorWidgetTests(WidgetTestCase):
    def setUp(self) -> None:
        self.editor = TableEditor("/tmp/items.csv", "a,b\nc,d\ne")
        self.widget = EditorWidget(self.editor)

    def tearDown(self) -> None:
        self.widget.destroy_editor()

    def _current(self) -> tuple[int, int]:
        index = self.widget.table_view.selectionModel().currentIndex()
        return index.row(), index.column()

    def test_focusing_a_cell_takes_a_snapshot(self) -> None:
        self.widget.select_cell(0, 1)
        self.assertEqual(self._current(), (0, 1))
        self.assertTrue(self.editor.history.can_undo())

    def test_arrow_keys_move_the_cursor(self) -> None:
        self.widget.select_cell(0, 0)
        QTest.keyClick(self.widget.table_view, QtCore.Qt.Key.Key_Down)
        self.assertEqual(self._current(), (1, 0))
        QTest.keyClick(self.widget.table_view, QtCore.Qt.Key.Key_Return)
        self.assertEqual(self._current(), (2, 0))
        QTest.keyClick(self.widget.table_view, QtCore.Qt.Key.Key_Right)
        self.assertEqual(self._current(), (2, 0))

    def _key_event(self, key: QtCore.Qt.Key, modifiers: QtCore.Qt.KeyboardModifier) -> QtGui.QKeyEvent:
        return QtGui.QKeyEvent(QtCore.QEvent.Type.KeyPress, key.value, modifiers)

    def test_modified_arrows_are_left_to_qt(self) -> None:
        self.widget.select_cell(0, 0)
        shift = QtCore.Qt.KeyboardModifier.ShiftModifier
        control = QtCore.Qt.KeyboardModifier.ControlModifier
        self.assertFalse(self.widget._handle_key(self._key_event(QtCore.Qt.Key.Key_Down, shift)))
        self.assertFalse(self.widget._handle_key(self._key_event(QtCore.Qt.Key.Key_Right, control)))
        self.assertEqual(self._current(), (0, 0))

    def test_keypad_arrows_still_navigate(self) -> None:
        self.widget.select_cell(0, 0)
        keypad = QtCore.Qt.KeyboardModifier.KeypadModifier
        self.assertTrue(self.widget._handle_key(self._key_event(QtCore.Qt.Key.Key_Down, keypad)))
        self.assertEqual(self._current(), (1, 0))

    def test_toolbar_commands(self) -> None:
        self.widget.insert_row()
        self.widget.insert_column()
        self.assertEqual(self.editor.grid.rows, [["a", "b", ""], ["c", "d", ""], ["e", ""], ["", "", ""]])
        self.widget.toggle_header()
        self.assertTrue(self.editor.grid.has_header)
        self.widget.undo()
        self.widget.undo()
        self.assertEqual(self.editor.grid.rows, [["a", "b"], ["c", "d"], ["e"]])
        self.assertTrue(self.widget.is_dirty())

    def test_editor_changes_emit_document_changed(self) -> None:
        paths = []
        self.widget.document_changed.connect(paths.append)
        self.widget.insert_row()
        self.assertEqual(paths, ["/tmp/items.csv"])


class MainWindowTests(WidgetTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.settings = QtCore.QSettings(
            os.path.join(self._tmp.name, "settings.ini"), QtCore.QSettings.Format.IniFormat
        )
        self.settings.setValue("max_file_size", 64)
        self.path = os.path.join(self._tmp.name, "items.csv")
        with open(self.path, "w", encoding="utf-8") as handle:
            handle.write("id,name\r\n1,bolt\r\n")

    def tearDown(self) -> None:
        del self.settings
        self._tmp.cleanup()

    def test_open_edit_save(self) -> None:
        window = MainWindow(self.settings)
        widget = window.open_file(self.path)
        self.assertIsInstance(widget, EditorWidget)
        self.assertIs(window.open_file(self.path), widget)
        widget.editor.on_cell_edited((1, 1), "nut")
        self.assertTrue(window.save_current())
        self.assertEqual(read_text(self.path), "id,name\n1,nut")
        self.assertFalse(widget.is_dirty())
        window.close_current_tab()
        window.deleteLater()

    def _write(self, name: str, text: str) -> str:
        path = os.path.join(self._tmp.name, name)
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(text)
        return path

    def test_save_as_onto_an_open_file_is_refused(self) -> None:
        other = self._write("other.csv", "x,y\n")
        window = MainWindow(self.settings)
        first = window.open_file(self.path)
        second = window.open_file(other)
        first.editor.on_cell_edited((1, 1), "nut")
        window.centralWidget().setCurrentWidget(first)
        with mock.patch.object(
            QtWidgets.QFileDialog, "getSaveFileName", return_value=(other, "")
        ), mock.patch.object(QtWidgets.QMessageBox, "warning") as warning:
            self.assertFalse(window.save_as_current())
        warning.assert_called_once()
        self.assertEqual(first.editor.path, self.path)
        self.assertTrue(first.is_dirty())
        self.assertEqual(read_text(other), "x,y\n")
        self.assertIs(window.open_file(other), second)

        window.close_tab(window.centralWidget().indexOf(second))
        self.assertIs(window.open_file(self.path), first)
        reopened = window.open_file(other)
        self.assertIsNot(reopened, second)
        self.assertEqual(window.centralWidget().count(), 2)
        first.editor.set_modified(False)
        window.deleteLater()

    def test_save_as_keeps_extension_matching_delimiter(self) -> None:
        window = MainWindow(self.settings)
        widget = window.open_file(self.path)
        target = os.path.join(self._tmp.name, "items.tsv")
        with mock.patch.object(
            QtWidgets.QFileDialog, "getSaveFileName", return_value=(target, "")
        ) as dialog, mock.patch.object(QtWidgets.QMessageBox, "warning") as warning:
            self.assertFalse(window.save_as_current())
        self.assertEqual(dialog.call_args[0][3], "Comma-Separated Files (*.csv)")
        warning.assert_called_once()
        self.assertFalse(os.path.exists(target))
        self.assertEqual(widget.editor.path, self.path)

        renamed = os.path.join(self._tmp.name, "renamed.csv")
        with mock.patch.object(
            QtWidgets.QFileDialog, "getSaveFileName", return_value=(renamed, "")
        ):
            self.assertTrue(window.save_as_current())
        self.assertEqual(widget.editor.path, renamed)
        self.assertEqual(read_text(renamed), "id,name\n1,bolt")
        self.assertIs(window.open_file(renamed), widget)
        window.deleteLater()

    def test_oversized_file_opens_as_text(self) -> None:
        big = os.path.join(self._tmp.name, "big.csv")
        with open(big, "w", encoding="utf-8") as handle:
            handle.write("x," * 100)
        window = MainWindow(self.settings)
        widget = window.open_file(big)
        self.assertIsInstance(widget, PlainTextView)
        self.assertTrue(widget.isReadOnly())
        window.deleteLater()

    def test_session_is_restored(self) -> None:
        window = MainWindow(self.settings)
        window.open_file(self.path)
        window.deleteLater()
        restored = MainWindow(self.settings)
        tabs = restored.centralWidget()
        self.assertEqual(tabs.count(), 1)
        widget = tabs.currentWidget()
        self.assertIsInstance(widget, EditorWidget)
        self.assertEqual(widget.editor.path, self.path)
        self.assertIs(restored.open_file(self.path), widget)
        self.assertEqual(tabs.count(), 1)
        restored.deleteLater()


if __name__ == "__main__":
    unittest.main()
