"""
MruMenu - Zentrale Versionsverwaltung
=====================================

Import: from config.version import VERSION, APP_NAME
"""

# App-Name, Fallback wenn QCoreApplication keinen Namen liefert
APP_NAME = "MruMenu"

VERSION = "1.0.0"

# Version tag of the settings tree ({company}\{product}\{version}).
# Independent of the package version so stored lists survive upgrades.
DEFAULT_SETTINGS_VERSION = "1.0a"
