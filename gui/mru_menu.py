"""
MruMenu - Qt Menu Binding
=========================

Realises the recent files list inside an existing QMenu.

Usage:
    file_menu = menubar.addMenu("&File")
    ...
    before = file_menu.addSeparator()
    after = file_menu.addAction("E&xit")

    recent = RecentFilesMenu(file_menu, StorageLocation(company="Acme"))
    recent.file_opened.connect(self._load_document)
    recent.bind(before, after)

    # in the File|Open handler:
    recent.add_file(path)
"""

from pathlib import Path
from typing import Optional, Union

from loguru import logger
from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMenu

from core.errors import MruConfigurationError
from core.menu_binding import MenuBinding
from core.recent_list import RecentFileList
from core.storage import StorageLocation, create_store

OPEN_HINT = "Open this file"


class QtMenuBinding(MenuBinding):
    """MenuBinding whose items are QActions of one QMenu."""

    def __init__(self, menu: QMenu):
        super().__init__()
        self.menu = menu

    def _position(self, action: QAction) -> int:
        actions = self.menu.actions()
        for index, candidate in enumerate(actions):
            if candidate is action:
                return index
        raise MruConfigurationError(f"Action '{action.text()}' is not part of menu '{self.menu.title()}'")

    def validate_anchor(self, anchor: QAction) -> None:
        self._position(anchor)

    def _region(self):
        if not self.is_bound():
            raise MruConfigurationError("MRU anchors not set")
        start = self._position(self._before) + 1
        end = self._position(self._after)
        if end < start:
            raise MruConfigurationError("After anchor precedes before anchor")
        return start, end

    def managed_count(self) -> int:
        start, end = self._region()
        return end - start

    def insert_item(self, index: int, label: str, is_separator: bool,
                    mnemonic: Optional[int]) -> QAction:
        start, end = self._region()
        if not 0 <= index <= end - start:
            raise IndexError(f"Index {index} outside managed region")

        action = QAction(label, self.menu)
        if is_separator:
            action.setSeparator(True)
        else:
            action.setStatusTip(OPEN_HINT)
            action.setData(mnemonic)
            action.triggered.connect(lambda checked=False, a=action: self._activate(a))

        # insertAction fügt VOR dem Ziel ein; der After-Anker ist immer ein gültiges Ziel
        target = self.menu.actions()[start + index]
        self.menu.insertAction(target, action)
        return action

    def remove_item(self, handle: QAction) -> None:
        self.menu.removeAction(handle)
        handle.deleteLater()

    def set_item_enabled(self, handle: QAction, enabled: bool) -> None:
        handle.setEnabled(enabled)

    def set_item_label(self, handle: QAction, label: str) -> None:
        handle.setText(label)

    def item_label(self, handle: QAction) -> str:
        return handle.text()


class RecentFilesMenu(QObject):
    """
    Store, QMenu binding and RecentFileList in one object.

    Signale:
        file_opened: a recent file was chosen (normalized path)
    """

    file_opened = Signal(str)

    def __init__(self, menu: QMenu, location: Optional[StorageLocation] = None,
                 backend: Optional[str] = None,
                 path: Optional[Union[str, Path]] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.store = create_store(location, backend, path)
        self.binding = QtMenuBinding(menu)
        self.recent = RecentFileList(self.store, self.binding, on_open=self.file_opened.emit)

    def bind(self, before: QAction, after: QAction) -> None:
        """Sets both anchors; the stored list is loaded once both are present."""
        self.recent.bind(before, after)
        logger.debug(f"[MRU] Menü '{self.binding.menu.title()}' gebunden")

    def add_file(self, path: str) -> None:
        self.recent.add_file(path)

    def clear(self) -> None:
        self.recent.clear()

    def set_enabled(self, enabled: bool) -> None:
        self.recent.enabled = enabled

    @property
    def last_opened(self) -> str:
        return self.recent.last_opened
