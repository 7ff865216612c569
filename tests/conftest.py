import os
from pathlib import Path

# Qt must use an offscreen buffer; set before any QApplication exists.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QSettings

from qknob.core.angle_math import AngleScale


@pytest.fixture
def tmp_settings(tmp_path: Path):
    """Point QSettings at an INI file in a temporary folder so tests stay isolated."""
    QSettings.setDefaultFormat(QSettings.IniFormat)
    QSettings.setPath(QSettings.IniFormat, QSettings.UserScope, str(tmp_path))
    s = QSettings("qknob.org", "QKnob")
    s.clear()
    yield s
    s.clear()


@pytest.fixture
def scale() -> AngleScale:
    return AngleScale(0.0, 100.0)


@pytest.fixture
def bounds():
    """200x200 container, center (100, 100)."""
    return (0.0, 0.0, 200.0, 200.0)
