import faulthandler
import logging
import os
import signal
import sys

from PyQt6 import QtCore, QtWidgets

from basic_csv.logging_config import setup_logging
from basic_csv.windows.main_window import MainWindow

logger = logging.getLogger(__name__)


def main() -> None:
    level = logging.DEBUG if os.environ.get("BASIC_CSV_DEBUG") else logging.INFO
    setup_logging(level, os.environ.get("BASIC_CSV_LOG_FILE") or None)

    def _log_unhandled(exc_type, exc_value, exc_traceback) -> None:
        logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = _log_unhandled
    faulthandler.enable()

    def _log_sigterm(signum, frame) -> None:
        logger.warning("Received signal %s, dumping stack.", signum)
        faulthandler.dump_traceback(file=sys.stderr, all_threads=True)

    signal.signal(signal.SIGTERM, _log_sigterm)
    app = QtWidgets.QApplication(sys.argv)
    window = MainWindow()
    for path in sys.argv[1:]:
        window.open_file(os.path.abspath(path))
    window.show()
    window.raise_()
    window.activateWindow()
    QtCore.QTimer.singleShot(0, window.activateWindow)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
