#!/usr/bin/env python3
"""
MruMenu - Demo-Fenster mit Recent-Files-Menü
Einstiegspunkt
"""

import os
import sys

from loguru import logger

# Füge Projektverzeichnis zum Pfad hinzu
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def build_window(recent_backend=None):
    """Erstellt ein Hauptfenster mit File-Menü und MRU-Bereich."""
    from PySide6.QtWidgets import QFileDialog, QLabel, QMainWindow

    from core.storage import StorageLocation
    from gui.mru_menu import RecentFilesMenu

    window = QMainWindow()
    window.setWindowTitle("MruMenu")
    label = QLabel("No file opened", window)
    window.setCentralWidget(label)

    file_menu = window.menuBar().addMenu("&File")
    open_action = file_menu.addAction("&Open...")
    clear_action = file_menu.addAction("&Clear Recent Files")
    before = file_menu.addSeparator()
    after = file_menu.addAction("E&xit")
    after.triggered.connect(window.close)

    recent = RecentFilesMenu(file_menu, StorageLocation(company="MruMenu"), backend=recent_backend,
                             parent=window)

    def show_file(path):
        label.setText(path)
        window.setWindowTitle(f"MruMenu - {os.path.basename(path)}")
        logger.info(f"Datei geöffnet: {path}")

    def open_file():
        path, _ = QFileDialog.getOpenFileName(window, "Open File", "", "All Files (*)")
        if path:
            show_file(path)
            recent.add_file(path)

    open_action.triggered.connect(open_file)
    clear_action.triggered.connect(recent.clear)
    recent.file_opened.connect(show_file)
    recent.bind(before, after)

    if recent.last_opened:
        show_file(recent.last_opened)

    window.recent_files = recent
    return window


def main():
    """Startet MruMenu"""
    from PySide6.QtWidgets import QApplication

    from config.version import APP_NAME, VERSION

    logger.remove()
    logger.add(sys.stderr, format="<level>{level: <8}</level> | {message}", level="INFO")

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_NAME)
    app.setApplicationVersion(VERSION)

    window = build_window()
    window.resize(640, 400)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
