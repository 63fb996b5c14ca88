"""
Test-Infrastruktur für MruMenu
==============================

- Qt läuft headless (QT_QPA_PLATFORM=offscreen, MUSS vor Qt-Import gesetzt sein)
- QSettings schreibt in ein temporäres Verzeichnis statt ins echte Profil
- Feature-Flags und MemoryStore werden pro Test zurückgesetzt
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication

from config.feature_flags import set_flag
from core.menu_binding import InMemoryMenuBinding
from core.storage import MemoryStore, StorageLocation

# Muss mit config/feature_flags.py synchron gehalten werden.
FEATURE_FLAG_DEFAULTS = {
    "mru_save_state": True,
    "mru_restore_on_write_failure": True,
    "mru_debug": False,
}


@pytest.fixture(scope="session")
def qapp():
    """Session-scoped QApplication fixture."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    app.setApplicationName("MruMenuTests")
    yield app


@pytest.fixture(autouse=True)
def _global_feature_flag_isolation():
    """Jeder Test startet mit Default-Flags."""
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)

    yield

    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)


@pytest.fixture(autouse=True)
def _memory_store_isolation():
    MemoryStore.reset_all()
    yield
    MemoryStore.reset_all()


@pytest.fixture
def settings_dir(tmp_path):
    """Redirects QSettings user scope (native and ini) into tmp_path."""
    for fmt in (QSettings.Format.NativeFormat, QSettings.Format.IniFormat):
        QSettings.setPath(fmt, QSettings.Scope.UserScope, str(tmp_path))
    return tmp_path


@pytest.fixture
def location():
    return StorageLocation(company="TestCo", product="MruTest", version="1.0a")


@pytest.fixture
def memory_store(location):
    return MemoryStore(location)


@pytest.fixture
def host_menu():
    """InMemoryMenuBinding laid out like a File menu: Open, separator (before anchor), Exit (after anchor)."""
    binding = InMemoryMenuBinding()
    binding.add_host_item("&Open...")
    before = binding.add_host_item("-", is_separator=True)
    after = binding.add_host_item("E&xit")
    return binding, before, after
