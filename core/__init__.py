"""
MruMenu - Core
==============

Widget-freie Logik der Most-Recently-Used Liste (QtCore nur für QSettings):

    from core import RecentFileList, MemoryStore, InMemoryMenuBinding, StorageLocation

    mru = RecentFileList(MemoryStore(StorageLocation(product="Demo")), InMemoryMenuBinding())
"""

from .accelerators import (
    MAX_ENTRIES,
    SEPARATOR_LABEL,
    assign_mnemonics,
    format_label,
    identifier_from_label,
    mnemonic_for_rank,
    mnemonic_from_label,
)
from .errors import MruConfigurationError, MruError, StorageWriteError
from .menu_binding import InMemoryMenuBinding, MenuBinding
from .recent_list import RecentEntry, RecentFileList
from .storage import (
    LAST_OPENED_KEY,
    MRU_NAMESPACE,
    MemoryStore,
    SettingsStore,
    StorageLocation,
    create_store,
)
