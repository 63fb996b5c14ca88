"""
MruMenu - Feature Flags
=======================

Laufzeit-Schalter für das MRU-Menü. Defaults gelten für jede neue
RecentFileList, einzelne Instanzen können sie überschreiben (save_state).
"""

from typing import Dict

FEATURE_FLAGS: Dict[str, bool] = {
    # Persistenz
    "mru_save_state": True,  # Liste und "Last Opened" in den Settings speichern
    "mru_restore_on_write_failure": True,  # Nach fehlgeschlagenem Commit alten Stand zurückschreiben

    # Debug-Modi
    "mru_debug": False,  # Renumbering/Eviction Trace ([MRU] debug, sehr verbose)
}


def is_enabled(flag: str) -> bool:
    """
    Prüft ob ein Feature-Flag aktiviert ist.

    Args:
        flag: Name des Feature-Flags

    Returns:
        True wenn aktiviert, False wenn nicht aktiviert oder unbekannt
    """
    return FEATURE_FLAGS.get(flag, False)


def set_flag(flag: str, value: bool) -> None:
    """
    Setzt ein Feature-Flag zur Laufzeit.
    Nützlich für Tests und Debugging.

    Args:
        flag: Name des Feature-Flags
        value: Neuer Wert
    """
    FEATURE_FLAGS[flag] = value


def get_all_flags() -> Dict[str, bool]:
    """Gibt alle Feature-Flags zurück."""
    return FEATURE_FLAGS.copy()
