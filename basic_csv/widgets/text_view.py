import os
from typing import Optional

from PyQt6 import QtGui, QtWidgets


class PlainTextView(QtWidgets.QPlainTextEdit):
    """Read-only viewer for files too large for the grid editor."""

    def __init__(self, path: str, text: str, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self._path = path
        self.setReadOnly(True)
        self.setLineWrapMode(QtWidgets.QPlainTextEdit.LineWrapMode.NoWrap)
        self.setFont(QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.SystemFont.FixedFont))
        self.setPlainText(text)

    @property
    def path(self) -> str:
        return self._path

    def get_title(self) -> str:
        return os.path.basename(self._path)

    def is_dirty(self) -> bool:
        return False
