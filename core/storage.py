"""
MruMenu - Settings Storage
==========================

Namespaced key/value store behind the recent files list.

Layout (relative to {company}\\{product}\\{version}):

    MRU Files/1 .. MRU Files/9   -> identifier at that mnemonic
    Last Opened                  -> last opened identifier

"Last Opened" sits outside the "MRU Files" namespace, so erasing the list
never forgets it.

Backends:
    native  - QSettings NativeFormat (registry on Windows, .conf elsewhere)
    ini     - QSettings IniFormat, optionally an explicit flat .ini file
    memory  - process-local dict (headless hosts, tests)
"""

import copy
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from loguru import logger
from PySide6.QtCore import QCoreApplication, QSettings

from config.version import APP_NAME, DEFAULT_SETTINGS_VERSION
from .errors import StorageWriteError

MRU_NAMESPACE = "MRU Files"
LAST_OPENED_KEY = "Last Opened"

BACKEND_ENV_VAR = "MRU_STORAGE_BACKEND"
DEFAULT_BACKEND = "native"


@dataclass(frozen=True)
class StorageLocation:
    """Hierarchical settings location {company}\\{product}\\{version}."""

    company: str = ""
    product: str = ""
    version: str = ""

    def resolved(self) -> "StorageLocation":
        """Fills in the host application name and the default version tag."""
        product = self.product or QCoreApplication.applicationName() or APP_NAME
        version = self.version or DEFAULT_SETTINGS_VERSION
        return StorageLocation(self.company, product, version)

    def key_path(self) -> str:
        loc = self.resolved()
        parts = [loc.company, loc.product, loc.version]
        return "\\".join(part for part in parts if part)


class SettingsStore(ABC):
    """
    Interface consumed by RecentFileList.

    Writes are buffered until commit(). Reads never raise: a missing key or
    a backend failure yields the default.
    """

    @abstractmethod
    def erase_namespace(self, namespace: str) -> None:
        ...

    @abstractmethod
    def write_string(self, namespace: str, key: str, value: str) -> None:
        ...

    @abstractmethod
    def read_string(self, namespace: str, key: str, default: str = "") -> str:
        ...

    @abstractmethod
    def commit(self) -> None:
        """Flushes pending writes. Raises StorageWriteError on failure."""
        ...


def _join(*parts: str) -> str:
    return "/".join(part for part in parts if part)


class QSettingsStore(SettingsStore):
    """SettingsStore on top of QSettings. All keys live below the version group."""

    def __init__(self, settings: QSettings, location: StorageLocation):
        self._settings = settings
        self.location = location.resolved()
        self._root = self.location.version

    @classmethod
    def native(cls, location: StorageLocation) -> "QSettingsStore":
        loc = location.resolved()
        settings = QSettings(
            QSettings.Format.NativeFormat,
            QSettings.Scope.UserScope,
            loc.company or loc.product,
            loc.product,
        )
        return cls(settings, loc)

    @classmethod
    def ini(cls, location: StorageLocation,
            path: Optional[Union[str, Path]] = None) -> "QSettingsStore":
        loc = location.resolved()
        if path is not None:
            settings = QSettings(str(path), QSettings.Format.IniFormat)
        else:
            settings = QSettings(
                QSettings.Format.IniFormat,
                QSettings.Scope.UserScope,
                loc.company or loc.product,
                loc.product,
            )
        return cls(settings, loc)

    @property
    def file_name(self) -> str:
        """Backing file (or registry path on Windows)."""
        return self._settings.fileName()

    def erase_namespace(self, namespace: str) -> None:
        self._settings.remove(_join(self._root, namespace))

    def write_string(self, namespace: str, key: str, value: str) -> None:
        self._settings.setValue(_join(self._root, namespace, key), value)

    def read_string(self, namespace: str, key: str, default: str = "") -> str:
        full_key = _join(self._root, namespace, key)
        try:
            value = self._settings.value(full_key, default)
        except Exception as e:
            logger.debug(f"[MRU] Lesen von '{full_key}' fehlgeschlagen: {e}")
            return default
        if value is None:
            return default
        # unquoted "a,b" in a hand-edited INI file comes back as a list
        if isinstance(value, (list, tuple)):
            return ",".join(str(part) for part in value)
        return str(value)

    def commit(self) -> None:
        self._settings.sync()
        status = self._settings.status()
        if status != QSettings.Status.NoError:
            raise StorageWriteError(
                f"QSettings sync failed for {self._settings.fileName()}: {status.name}"
            )


class MemoryStore(SettingsStore):
    """
    Dict-backed store. Instances with the same key_path() share their data,
    so a fresh instance sees what an earlier one committed.

    fail_writes=True makes commit() drop the pending writes and raise.
    """

    _shared: Dict[str, Dict[str, Dict[str, str]]] = {}

    def __init__(self, location: Optional[StorageLocation] = None, fail_writes: bool = False):
        self.location = (location or StorageLocation()).resolved()
        self.fail_writes = fail_writes
        self._committed = MemoryStore._shared.setdefault(self.location.key_path(), {})
        self._pending: Optional[Dict[str, Dict[str, str]]] = None

    @classmethod
    def reset_all(cls) -> None:
        """Forgets every stored location."""
        cls._shared.clear()

    def _view(self) -> Dict[str, Dict[str, str]]:
        return self._pending if self._pending is not None else self._committed

    def _writable(self) -> Dict[str, Dict[str, str]]:
        if self._pending is None:
            self._pending = copy.deepcopy(self._committed)
        return self._pending

    def erase_namespace(self, namespace: str) -> None:
        self._writable().pop(namespace, None)

    def write_string(self, namespace: str, key: str, value: str) -> None:
        self._writable().setdefault(namespace, {})[key] = value

    def read_string(self, namespace: str, key: str, default: str = "") -> str:
        return self._view().get(namespace, {}).get(key, default)

    def commit(self) -> None:
        if self._pending is None:
            return
        pending, self._pending = self._pending, None
        if self.fail_writes:
            raise StorageWriteError(f"write to {self.location.key_path()} rejected")
        self._committed.clear()
        self._committed.update(pending)

    def snapshot(self) -> Dict[str, Dict[str, str]]:
        """Copy of the committed data."""
        return copy.deepcopy(self._committed)


def create_store(location: Optional[StorageLocation] = None,
                 backend: Optional[str] = None,
                 path: Optional[Union[str, Path]] = None) -> SettingsStore:
    """
    Creates the settings backend selected by configuration.

    Args:
        location: {company, product, version}; defaults filled in from the host app
        backend: "native", "ini" or "memory"; default from $MRU_STORAGE_BACKEND
        path: explicit .ini file (ini backend only)
    """
    location = location or StorageLocation()
    backend = (backend or os.environ.get(BACKEND_ENV_VAR) or DEFAULT_BACKEND).lower()

    if backend == "native":
        store = QSettingsStore.native(location)
    elif backend == "ini":
        store = QSettingsStore.ini(location, path)
    elif backend == "memory":
        store = MemoryStore(location)
    else:
        raise ValueError(f"Unknown MRU storage backend: {backend}")

    logger.debug(f"[MRU] Storage backend '{backend}' at {location.key_path()}")
    return store
