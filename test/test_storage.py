"""
Tests für die Settings-Backends (QSettings native/ini, MemoryStore)
und die Backend-Auswahl.
"""

import sys

import pytest

import core.storage as storage_module
from core.errors import StorageWriteError
from core.menu_binding import InMemoryMenuBinding
from core.recent_list import RecentFileList
from core.storage import (
    LAST_OPENED_KEY,
    MRU_NAMESPACE,
    MemoryStore,
    QSettingsStore,
    StorageLocation,
    create_store,
)


class TestStorageLocation:

    def test_key_path(self, location):
        assert location.key_path() == "TestCo\\MruTest\\1.0a"

    def test_company_is_optional(self):
        assert StorageLocation(product="Viewer").key_path() == "Viewer\\1.0a"

    def test_version_defaults(self):
        assert StorageLocation(product="Viewer").resolved().version == "1.0a"

    def test_product_defaults_to_application_name(self, qapp):
        assert StorageLocation().resolved().product == "MruMenuTests"

    def test_product_falls_back_to_app_constant(self, monkeypatch):

        class _NoApp:
            @staticmethod
            def applicationName():
                return ""

        monkeypatch.setattr(storage_module, "QCoreApplication", _NoApp)
        assert StorageLocation().resolved().product == "MruMenu"


class TestMemoryStore:

    def test_missing_key_yields_default(self, memory_store):
        assert memory_store.read_string(MRU_NAMESPACE, "1") == ""
        assert memory_store.read_string(MRU_NAMESPACE, "1", "none") == "none"

    def test_pending_writes_are_readable(self, memory_store):
        memory_store.write_string(MRU_NAMESPACE, "1", "a")
        assert memory_store.read_string(MRU_NAMESPACE, "1") == "a"

    def test_instances_share_committed_data(self, memory_store, location):
        memory_store.write_string(MRU_NAMESPACE, "1", "a")
        assert MemoryStore(location).read_string(MRU_NAMESPACE, "1") == ""

        memory_store.commit()
        assert MemoryStore(location).read_string(MRU_NAMESPACE, "1") == "a"

    def test_failed_commit_discards_pending(self, memory_store):
        memory_store.fail_writes = True
        memory_store.write_string(MRU_NAMESPACE, "1", "a")

        with pytest.raises(StorageWriteError):
            memory_store.commit()
        assert memory_store.read_string(MRU_NAMESPACE, "1") == ""

    def test_erase_keeps_other_namespaces(self, memory_store):
        memory_store.write_string(MRU_NAMESPACE, "1", "a")
        memory_store.write_string("", LAST_OPENED_KEY, "a")
        memory_store.erase_namespace(MRU_NAMESPACE)
        memory_store.commit()

        assert memory_store.snapshot() == {"": {LAST_OPENED_KEY: "a"}}


class TestQSettingsStore:

    def test_ini_round_trip(self, settings_dir, location):
        store = QSettingsStore.ini(location)
        store.write_string(MRU_NAMESPACE, "1", "/tmp/a.txt")
        store.write_string("", LAST_OPENED_KEY, "/tmp/a.txt")
        store.commit()

        reopened = QSettingsStore.ini(location)
        assert reopened.read_string(MRU_NAMESPACE, "1") == "/tmp/a.txt"
        assert reopened.read_string("", LAST_OPENED_KEY) == "/tmp/a.txt"
        assert reopened.file_name.startswith(str(settings_dir))

    def test_explicit_ini_file(self, tmp_path, location):
        path = tmp_path / "MruTest.ini"
        store = QSettingsStore.ini(location, path)
        store.write_string(MRU_NAMESPACE, "2", "/tmp/b.txt")
        store.commit()

        assert path.exists()
        assert QSettingsStore.ini(location, path).read_string(MRU_NAMESPACE, "2") == "/tmp/b.txt"

    def test_unquoted_comma_in_edited_file(self, tmp_path, location):
        # Von Hand editierte Datei: QSettings liefert hier eine Liste
        path = tmp_path / "edited.ini"
        path.write_text("[1.0a]\nLast%20Opened=/docs/a,b.txt\n")

        store = QSettingsStore.ini(location, path)

        assert store.read_string("", LAST_OPENED_KEY) == "/docs/a,b.txt"

    def test_erase_namespace_keeps_last_opened(self, settings_dir, location):
        store = QSettingsStore.ini(location)
        store.write_string(MRU_NAMESPACE, "1", "/tmp/a.txt")
        store.write_string("", LAST_OPENED_KEY, "/tmp/a.txt")
        store.commit()

        store.erase_namespace(MRU_NAMESPACE)
        store.commit()

        assert store.read_string(MRU_NAMESPACE, "1") == ""
        assert store.read_string("", LAST_OPENED_KEY) == "/tmp/a.txt"

    def test_versions_are_separate(self, settings_dir):
        old = QSettingsStore.ini(StorageLocation("TestCo", "MruTest", "1.0a"))
        old.write_string(MRU_NAMESPACE, "1", "/tmp/old.txt")
        old.commit()

        new = QSettingsStore.ini(StorageLocation("TestCo", "MruTest", "2.0"))
        assert new.read_string(MRU_NAMESPACE, "1") == ""

    def test_unwritable_file_raises_on_commit(self, tmp_path, location):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = QSettingsStore.ini(location, blocker / "MruTest.ini")
        store.write_string(MRU_NAMESPACE, "1", "/tmp/a.txt")

        with pytest.raises(StorageWriteError):
            store.commit()

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="native format is a .conf file only on Linux")
    def test_native_round_trip(self, settings_dir, location):
        store = QSettingsStore.native(location)
        store.write_string(MRU_NAMESPACE, "1", "/tmp/a.txt")
        store.commit()

        assert QSettingsStore.native(location).read_string(MRU_NAMESPACE, "1") == "/tmp/a.txt"


class TestCreateStore:

    def test_memory_backend(self, location):
        assert isinstance(create_store(location, "memory"), MemoryStore)

    def test_ini_backend(self, settings_dir, location):
        assert isinstance(create_store(location, "ini"), QSettingsStore)

    def test_backend_from_environment(self, settings_dir, location, monkeypatch):
        monkeypatch.setenv("MRU_STORAGE_BACKEND", "memory")
        assert isinstance(create_store(location), MemoryStore)

    def test_unknown_backend_raises(self, location):
        with pytest.raises(ValueError):
            create_store(location, "floppy")


class TestIniPersistence:
    """RecentFileList über eine echte INI-Datei, Neustart simuliert."""

    def _fresh(self, path, location):
        binding = InMemoryMenuBinding()
        before = binding.add_host_item("-", is_separator=True)
        after = binding.add_host_item("E&xit")
        recent = RecentFileList(QSettingsStore.ini(location, path), binding)
        recent.bind(before, after)
        return recent, binding

    def test_restart_restores_list(self, tmp_path, location):
        path = tmp_path / "mru.ini"
        recent, _ = self._fresh(path, location)
        for name in ["/data/a.txt", "/data/b.txt", "/data/c.txt"]:
            recent.add_file(name)
        recent.add_file("/data/a.txt")

        restarted, binding = self._fresh(path, location)

        assert restarted.files() == ["/data/a.txt", "/data/c.txt", "/data/b.txt"]
        assert restarted.last_opened == "/data/a.txt"
        assert binding.labels()[1] == "&1 /data/a.txt"

    def test_clear_survives_restart(self, tmp_path, location):
        path = tmp_path / "mru.ini"
        recent, _ = self._fresh(path, location)
        recent.add_file("/data/a.txt")
        recent.clear()

        restarted, _ = self._fresh(path, location)

        assert restarted.files() == []
        assert restarted.last_opened == "/data/a.txt"

    def test_ampersand_in_name_survives_restart(self, tmp_path, location):
        path = tmp_path / "mru.ini"
        recent, _ = self._fresh(path, location)
        recent.add_file("/data/R&D.txt")

        restarted, binding = self._fresh(path, location)

        assert restarted.files() == ["/data/R&D.txt"]
        assert binding.labels()[1] == "&1 /data/R&&D.txt"
