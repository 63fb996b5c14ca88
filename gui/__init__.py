"""MruMenu - Qt realisation of the recent files menu."""
