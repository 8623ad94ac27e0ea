import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6 import QtWidgets  # noqa: E402

# Create a single QApplication for the whole session so that test modules
# which only need a QCoreApplication don't prevent widget tests from running.
_app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
