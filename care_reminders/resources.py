from __future__ import annotations
from pathlib import Path
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QApplication, QStyle

ASSETS_DIR = Path(__file__).resolve().parent / "assets"


def tray_icon() -> QIcon:
    """Bundled tray icon, or the platform's information icon when none ships."""
    p = ASSETS_DIR / "tray.png"
    if p.exists():
        return QIcon(str(p))
    return QApplication.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxInformation)
