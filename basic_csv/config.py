import logging
from dataclasses import dataclass
from typing import Optional

from PyQt6 import QtCore

from basic_csv.editor import MAX_RENDER_ROWS
from basic_csv.openers import MAX_FILE_SIZE

logger = logging.getLogger(__name__)

ORGANIZATION = "BasicCsv"
APPLICATION = "BasicCsv"
THEMES = ("light", "dark")


@dataclass
class EditorSettings:
    max_file_size: int = MAX_FILE_SIZE
    max_render_rows: int = MAX_RENDER_ROWS
    history_limit: int = 0
    theme: str = "light"

    def history_limit_or_none(self) -> Optional[int]:
        return self.history_limit if self.history_limit > 0 else None


def open_settings() -> QtCore.QSettings:
    return QtCore.QSettings(ORGANIZATION, APPLICATION)


def _read_int(settings: QtCore.QSettings, key: str, default: int, minimum: int) -> int:
    raw = settings.value(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring setting %s=%r: not an integer.", key, raw)
        return default
    if value < minimum:
        logger.warning("Ignoring setting %s=%d: below %d.", key, value, minimum)
        return default
    return value


def load_settings(settings: QtCore.QSettings) -> EditorSettings:
    defaults = EditorSettings()
    theme = settings.value("ui_theme", defaults.theme, type=str)
    if theme not in THEMES:
        logger.warning("Unknown theme %r, using %s.", theme, defaults.theme)
        theme = defaults.theme
    return EditorSettings(
        max_file_size=_read_int(settings, "max_file_size", defaults.max_file_size, 1),
        max_render_rows=_read_int(settings, "max_render_rows", defaults.max_render_rows, 1),
        history_limit=_read_int(settings, "history_limit", defaults.history_limit, 0),
        theme=theme,
    )


def save_settings(settings: QtCore.QSettings, values: EditorSettings) -> None:
    settings.setValue("max_file_size", values.max_file_size)
    settings.setValue("max_render_rows", values.max_render_rows)
    settings.setValue("history_limit", values.history_limit)
    settings.setValue("ui_theme", values.theme)
    settings.sync()
