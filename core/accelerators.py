"""
MruMenu - Accelerator Allocation
================================

Mnemonic digits for the recent files menu.

The mapping is purely positional: rank 0 (most recent) gets "&1", rank 8
gets "&9". It is recomputed in full after every mutation, so the settings
keys "1".."9" always mirror the in-memory order.
"""

from typing import Iterable, List, Optional

# Anzahl der Einträge = Anzahl der Ziffern 1..9
MAX_ENTRIES = 9

SEPARATOR_LABEL = "-"


def mnemonic_for_rank(rank: int) -> int:
    """Returns the mnemonic digit for a zero-based recency rank."""
    if not 0 <= rank < MAX_ENTRIES:
        raise ValueError(f"Rank {rank} outside 0..{MAX_ENTRIES - 1}")
    return rank + 1


def assign_mnemonics(identifiers: Iterable[str]) -> List[int]:
    """
    Assigns mnemonics for a complete list in recency order.

    Args:
        identifiers: Identifiers, most recent first (at most MAX_ENTRIES)

    Returns:
        [1, 2, ..., n]
    """
    return [mnemonic_for_rank(rank) for rank, _ in enumerate(identifiers)]


def format_label(mnemonic: int, identifier: str) -> str:
    """
    Menu caption for an accelerated entry, e.g. '&3 /home/user/a.txt'.

    '&' inside the identifier is doubled so the menu shows it literally
    instead of taking it as a second mnemonic.
    """
    return f"&{mnemonic} {identifier.replace('&', '&&')}"


def mnemonic_from_label(label: str) -> Optional[int]:
    """
    Returns the digit following a leading '&', or None if the label has no
    accelerator (separators, foreign items).
    """
    if len(label) < 2 or label[0] != "&" or not label[1].isdigit():
        return None
    return int(label[1])


def identifier_from_label(label: str) -> str:
    """Inverse of format_label: strips the '&<digits>' marker and undoes '&&'."""
    if label[:1] == "&" and label[1:2].isdigit():
        label = label[1:].lstrip("0123456789")
    return label.strip().replace("&&", "&")
