"""
MruMenu - Menu Binding
======================

Contract between RecentFileList and the host menu.

The host owns a flat list of items. Two of them, the anchors, delimit the
region managed by the MRU list:

    ...
    <before anchor>        usually a separator
    &1 /path/most/recent   managed
    &2 /path/older         managed
    -                      managed separator (only if the list is non-empty)
    <after anchor>         usually "Exit"
    ...

Indices passed to insert_item() are relative to that region, 0 being the
slot directly after the before anchor. Handles are opaque to the list; the
binding owns the underlying items.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .accelerators import mnemonic_from_label
from .errors import MruConfigurationError

ActivationHandler = Callable[[Any], None]


class MenuBinding(ABC):
    """Abstract host menu. Subclasses realise the item operations."""

    def __init__(self):
        self._before: Any = None
        self._after: Any = None
        self._activation_handler: Optional[ActivationHandler] = None

    @property
    def before_anchor(self) -> Any:
        return self._before

    @property
    def after_anchor(self) -> Any:
        return self._after

    def is_bound(self) -> bool:
        return self._before is not None and self._after is not None

    def assign_anchor(self, which: str, anchor: Any) -> None:
        """
        Replaces one anchor. Called by RecentFileList, which discards its
        items before and reloads after.
        """
        if which not in ("before", "after"):
            raise ValueError(f"Unknown anchor: {which}")
        if anchor is not None:
            self.validate_anchor(anchor)
        if which == "before":
            self._before = anchor
        else:
            self._after = anchor

    def set_activation_handler(self, handler: Optional[ActivationHandler]) -> None:
        self._activation_handler = handler

    def _activate(self, handle: Any) -> None:
        if self._activation_handler is not None:
            self._activation_handler(handle)

    def validate_anchor(self, anchor: Any) -> None:
        """Raises MruConfigurationError if the anchor does not belong to this menu."""

    @abstractmethod
    def managed_count(self) -> int:
        """Number of host items currently between the two anchors."""

    @abstractmethod
    def insert_item(self, index: int, label: str, is_separator: bool,
                    mnemonic: Optional[int]) -> Any:
        ...

    @abstractmethod
    def remove_item(self, handle: Any) -> None:
        ...

    @abstractmethod
    def set_item_enabled(self, handle: Any, enabled: bool) -> None:
        ...

    @abstractmethod
    def set_item_label(self, handle: Any, label: str) -> None:
        ...

    @abstractmethod
    def item_label(self, handle: Any) -> str:
        ...


@dataclass(eq=False)
class MenuItem:
    """Item of an InMemoryMenuBinding. Compared by identity."""

    label: str
    is_separator: bool = False
    mnemonic: Optional[int] = None
    enabled: bool = True


class InMemoryMenuBinding(MenuBinding):
    """
    Host menu as a plain list, for headless hosts and tests.

    Usage:
        binding = InMemoryMenuBinding()
        before = binding.add_host_item("-", is_separator=True)
        after = binding.add_host_item("Exit")
    """

    def __init__(self):
        super().__init__()
        self._items: List[MenuItem] = []

    @property
    def items(self) -> List[MenuItem]:
        return list(self._items)

    def labels(self) -> List[str]:
        return [item.label for item in self._items]

    def add_host_item(self, label: str, is_separator: bool = False) -> MenuItem:
        """Appends a non-managed host item (anchor candidates, Exit, ...)."""
        item = MenuItem(label, is_separator)
        self._items.append(item)
        return item

    def managed_items(self) -> List[MenuItem]:
        start, end = self._region()
        return self._items[start:end]

    def activate(self, handle: MenuItem) -> None:
        """Simulates the user choosing an item."""
        if handle.enabled and not handle.is_separator:
            self._activate(handle)

    def _index_of(self, item: MenuItem) -> int:
        for index, candidate in enumerate(self._items):
            if candidate is item:
                return index
        raise MruConfigurationError(f"Menu item '{item.label}' is not part of this menu")

    def _region(self):
        if not self.is_bound():
            raise MruConfigurationError("MRU anchors not set")
        start = self._index_of(self._before) + 1
        end = self._index_of(self._after)
        if end < start:
            raise MruConfigurationError("After anchor precedes before anchor")
        return start, end

    def validate_anchor(self, anchor: MenuItem) -> None:
        self._index_of(anchor)

    def managed_count(self) -> int:
        start, end = self._region()
        return end - start

    def insert_item(self, index: int, label: str, is_separator: bool,
                    mnemonic: Optional[int]) -> MenuItem:
        start, end = self._region()
        if not 0 <= index <= end - start:
            raise IndexError(f"Index {index} outside managed region")
        item = MenuItem(label, is_separator, mnemonic)
        self._items.insert(start + index, item)
        return item

    def remove_item(self, handle: MenuItem) -> None:
        del self._items[self._index_of(handle)]

    def set_item_enabled(self, handle: MenuItem, enabled: bool) -> None:
        handle.enabled = enabled

    def set_item_label(self, handle: MenuItem, label: str) -> None:
        handle.label = label
        handle.mnemonic = mnemonic_from_label(label)

    def item_label(self, handle: MenuItem) -> str:
        return handle.label
