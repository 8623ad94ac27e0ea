import logging
import os
from typing import Any, Callable, Iterable, List, Optional, Tuple

from basic_csv.editor import MAX_RENDER_ROWS, TableEditor, TextReader

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024
TABLE_EXTENSIONS = (".csv", ".tsv")

Opener = Callable[[str], Optional[Any]]


def is_editable_size(size: int, limit: int = MAX_FILE_SIZE) -> bool:
    return size <= limit


def extension_of(uri: str) -> str:
    _, ext = os.path.splitext(uri)
    return ext.lower()


class Registration:
    def __init__(self, registry: "OpenerRegistry", entries: List[Tuple[str, Opener]]) -> None:
        self._registry = registry
        self._entries = entries
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._registry._remove(self._entries)
        self._disposed = True


class OpenerRegistry:
    def __init__(self) -> None:
        self._entries: List[Tuple[str, Opener]] = []

    def register(self, extensions: Iterable[str], factory: Opener) -> Registration:
        entries = []
        for ext in extensions:
            ext = ext.lower()
            if not ext.startswith("."):
                ext = f".{ext}"
            entries.append((ext, factory))
        self._entries.extend(entries)
        return Registration(self, entries)

    def _remove(self, entries: List[Tuple[str, Opener]]) -> None:
        for entry in entries:
            if entry in self._entries:
                self._entries.remove(entry)

    def handles(self, uri: str) -> bool:
        ext = extension_of(uri)
        return any(entry_ext == ext for entry_ext, _ in self._entries)

    def open(self, uri: str) -> Optional[Any]:
        ext = extension_of(uri)
        for entry_ext, factory in list(self._entries):
            if entry_ext != ext:
                continue
            result = factory(uri)
            if result is not None:
                return result
        return None


def install(
    registry: OpenerRegistry,
    reader: TextReader,
    size_of: Callable[[str], int],
    fallback: Opener,
    max_file_size: int = MAX_FILE_SIZE,
    max_render_rows: int = MAX_RENDER_ROWS,
    history_limit: Optional[int] = None,
) -> Registration:
    def _open_table(uri: str) -> Optional[Any]:
        size = size_of(uri)
        if not is_editable_size(size, max_file_size):
            logger.warning(
                "%s is %d bytes (limit %d); opening as plain text.", uri, size, max_file_size
            )
            return fallback(uri)
        return TableEditor(
            uri,
            reader(uri),
            history_limit=history_limit,
            max_render_rows=max_render_rows,
        )

    return registry.register(TABLE_EXTENSIONS, _open_table)
