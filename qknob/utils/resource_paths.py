from __future__ import annotations

import sys
from pathlib import Path


def package_dir() -> Path:
    """
    Return the directory holding bundled package resources.

    - In PyInstaller onefile/onedir: sys._MEIPASS/qknob (temporary extraction dir).
    - Otherwise: the installed qknob package directory.
    """
    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        return Path(sys._MEIPASS) / "qknob"  # type: ignore[attr-defined]
    # qknob/utils/resource_paths.py -> parents[1] is the package.
    return Path(__file__).resolve().parents[1]


def skins_dir() -> Path:
    """Return the directory of the bundled skins."""
    return package_dir() / "skins"


def skin_dir(name: str) -> Path:
    return skins_dir() / name
