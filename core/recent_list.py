"""
MruMenu - Recent File List
==========================

Most-recently-used file list with mnemonic keys &1..&9.

Usage:
    mru = RecentFileList(store, binding, on_open=open_document)
    mru.set_before_item(separator_action)
    mru.set_after_item(exit_action)      # loads the stored list

    # from the normal File|Open handler (never from on_open):
    mru.add_file(path)

Every mutation is written to the store before memory and menu change.
If the commit fails, the previous state is written back and the
StorageWriteError propagates; list and menu stay as they were.
"""

import os
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterator, List, Optional, Tuple

from loguru import logger

from config.feature_flags import is_enabled
from .accelerators import (
    MAX_ENTRIES,
    SEPARATOR_LABEL,
    assign_mnemonics,
    format_label,
    identifier_from_label,
    mnemonic_for_rank,
)
from .errors import MruConfigurationError, StorageWriteError
from .menu_binding import MenuBinding
from .storage import LAST_OPENED_KEY, MRU_NAMESPACE, SettingsStore


@dataclass
class RecentEntry:
    """One menu entry. handle belongs to the MenuBinding."""

    identifier: str
    mnemonic: Optional[int] = None
    handle: Any = None


class RecentFileList:
    """
    Bounded recency list (MAX_ENTRIES) backed by a SettingsStore and shown
    through a MenuBinding.

    Invariants after every public call:
    - at most MAX_ENTRIES entries, no duplicate identifiers
    - mnemonics are 1..n in recency order
    - the managed separator exists iff the list is non-empty
    """

    def __init__(self, store: SettingsStore, binding: MenuBinding, *,
                 on_open: Optional[Callable[[str], None]] = None,
                 save_state: Optional[bool] = None,
                 normalizer: Callable[[str], str] = os.path.abspath):
        self._store = store
        self._binding = binding
        self.on_open = on_open
        self.save_state = is_enabled("mru_save_state") if save_state is None else save_state
        self._normalize = normalizer

        self._entries: List[RecentEntry] = []
        self._separator: Any = None
        self._enabled = True
        self._busy = False

        self._last_opened = store.read_string("", LAST_OPENED_KEY, "")
        binding.set_activation_handler(self._on_item_activated)

        if binding.is_bound():
            with self._exclusive("load"):
                self._load()

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def entries(self) -> Tuple[RecentEntry, ...]:
        return tuple(replace(entry) for entry in self._entries)

    def files(self) -> List[str]:
        """Identifiers, most recent first."""
        return [entry.identifier for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.files())

    def __contains__(self, identifier: str) -> bool:
        return self._normalize(identifier) in self.files()

    @property
    def is_bound(self) -> bool:
        return self._binding.is_bound()

    @property
    def has_separator(self) -> bool:
        return self._separator is not None

    # =========================================================================
    # Anchors
    # =========================================================================

    def set_before_item(self, anchor: Any) -> None:
        """Menu item preceding the MRU region, usually a separator."""
        self._rebind(before=anchor)

    def set_after_item(self, anchor: Any) -> None:
        """Menu item following the MRU region, usually Exit."""
        self._rebind(after=anchor)

    def bind(self, before: Any, after: Any) -> None:
        """Replaces both anchors with a single reload (moving the region)."""
        self._rebind(before=before, after=after)

    def _rebind(self, **anchors: Any) -> None:
        current = {"before": self._binding.before_anchor, "after": self._binding.after_anchor}
        if all(current[which] is anchor for which, anchor in anchors.items()):
            return
        for anchor in anchors.values():
            if anchor is not None:
                self._binding.validate_anchor(anchor)

        with self._exclusive("rebind"):
            # alte Handles gehören zur alten Region
            if self._binding.is_bound():
                self._discard_items()
            for which, anchor in anchors.items():
                self._binding.assign_anchor(which, anchor)
            if self._binding.is_bound():
                self._load()

    # =========================================================================
    # Operations
    # =========================================================================

    def add_file(self, identifier: str) -> None:
        """
        Registers an opened file: it moves to &1, older entries are
        renumbered, duplicates and entries beyond &9 are dropped.
        """
        if not identifier:
            raise ValueError("identifier must not be empty")
        self._require_bound("add_file")

        with self._exclusive("add_file"):
            name = self._normalize(identifier)

            fresh = RecentEntry(name, mnemonic_for_rank(0))
            kept = [fresh]
            evicted = []
            for entry in self._entries:
                if entry.identifier == name or len(kept) >= MAX_ENTRIES:
                    evicted.append(entry)
                else:
                    kept.append(entry)

            if is_enabled("mru_debug"):
                logger.debug(f"[MRU] add_file {name}: kept={len(kept)} "
                             f"evicted={[e.identifier for e in evicted]}")

            identifiers = [entry.identifier for entry in kept]
            self._commit(
                lambda: self._write_state(identifiers, name),
                lambda: self._write_state(self.files(), self._last_opened),
            )

            # persisted, now update menu and memory
            for entry in evicted:
                self._binding.remove_item(entry.handle)
            fresh.handle = self._insert_entry(0, fresh)
            for entry, mnemonic in zip(kept[1:], assign_mnemonics(kept)[1:]):
                entry.mnemonic = mnemonic
                self._binding.set_item_label(entry.handle, format_label(mnemonic, entry.identifier))

            self._entries = kept
            self._ensure_separator()
            self._last_opened = name

    def clear(self) -> None:
        """Removes all entries. "Last Opened" is kept."""
        self._require_bound("clear")

        with self._exclusive("clear"):
            self._commit(
                lambda: self._write_state([], None),
                lambda: self._write_state(self.files(), None),
            )
            self._discard_items()
            logger.info("[MRU] Liste geleert")

    def load(self) -> None:
        """
        Rebuilds the list from the store. Runs automatically when both
        anchors are set; calling it on a populated region is an error.
        """
        self._require_bound("load")
        with self._exclusive("load"):
            self._load()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        value = bool(value)
        if value == self._enabled:
            return
        self._enabled = value
        for handle in self._handles():
            self._binding.set_item_enabled(handle, value)

    @property
    def last_opened(self) -> str:
        return self._last_opened

    @last_opened.setter
    def last_opened(self, name: str) -> None:
        self.set_last_opened(name)

    def get_last_opened(self) -> str:
        return self._last_opened

    def set_last_opened(self, name: str) -> None:
        """Persists immediately when save_state is on."""
        with self._exclusive("set_last_opened"):
            self._set_last_opened(name)

    # =========================================================================
    # Internals
    # =========================================================================

    @contextmanager
    def _exclusive(self, operation: str):
        if self._busy:
            raise MruConfigurationError(f"{operation} called while another MRU operation is running")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _require_bound(self, operation: str) -> None:
        if not self._binding.is_bound():
            raise MruConfigurationError(
                f"{operation}: before and after menu items must be set first"
            )

    def _handles(self) -> List[Any]:
        handles = [entry.handle for entry in self._entries if entry.handle is not None]
        if self._separator is not None:
            handles.append(self._separator)
        return handles

    def _insert_entry(self, index: int, entry: RecentEntry) -> Any:
        handle = self._binding.insert_item(
            index, format_label(entry.mnemonic, entry.identifier), False, entry.mnemonic
        )
        if not self._enabled:
            self._binding.set_item_enabled(handle, False)
        return handle

    def _ensure_separator(self) -> None:
        if self._entries and self._separator is None:
            self._separator = self._binding.insert_item(
                len(self._entries), SEPARATOR_LABEL, True, None
            )
            if not self._enabled:
                self._binding.set_item_enabled(self._separator, False)

    def _discard_items(self) -> None:
        for handle in self._handles():
            self._binding.remove_item(handle)
        self._entries = []
        self._separator = None

    def _load(self) -> None:
        if self._binding.managed_count() != 0:
            raise MruConfigurationError("MRU menu items not initialized correctly")

        identifiers: List[str] = []
        for mnemonic in range(1, MAX_ENTRIES + 1):
            name = self._store.read_string(MRU_NAMESPACE, str(mnemonic), "")
            if name and name not in identifiers:
                identifiers.append(name)

        self._entries = []
        for rank, (name, mnemonic) in enumerate(zip(identifiers, assign_mnemonics(identifiers))):
            entry = RecentEntry(name, mnemonic)
            entry.handle = self._insert_entry(rank, entry)
            self._entries.append(entry)
        self._ensure_separator()

        self._last_opened = self._store.read_string("", LAST_OPENED_KEY, "")
        logger.info(f"[MRU] {len(self._entries)} Einträge geladen")

    def _write_state(self, identifiers: List[str], last_opened: Optional[str]) -> None:
        self._store.erase_namespace(MRU_NAMESPACE)
        for mnemonic, name in zip(assign_mnemonics(identifiers), identifiers):
            self._store.write_string(MRU_NAMESPACE, str(mnemonic), name)
        if last_opened is not None:
            self._store.write_string("", LAST_OPENED_KEY, last_opened)

    def _commit(self, write: Callable[[], None], restore: Callable[[], None]) -> None:
        if not self.save_state:
            return
        try:
            write()
            self._store.commit()
        except StorageWriteError as e:
            logger.error(f"[MRU] Speichern fehlgeschlagen: {e}")
            if is_enabled("mru_restore_on_write_failure"):
                try:
                    restore()
                    self._store.commit()
                except StorageWriteError as restore_error:
                    logger.error(f"[MRU] Wiederherstellen fehlgeschlagen: {restore_error}")
            raise

    def _set_last_opened(self, name: str) -> None:
        previous = self._last_opened
        self._commit(
            lambda: self._store.write_string("", LAST_OPENED_KEY, name),
            lambda: self._store.write_string("", LAST_OPENED_KEY, previous),
        )
        self._last_opened = name

    def _on_item_activated(self, handle: Any) -> None:
        if not any(entry.handle is handle for entry in self._entries):
            logger.debug("[MRU] Aktivierung eines fremden Menüeintrags ignoriert")
            return

        name = identifier_from_label(self._binding.item_label(handle))
        with self._exclusive("activation"):
            self._set_last_opened(name)
        if self.on_open is not None:
            self.on_open(name)
