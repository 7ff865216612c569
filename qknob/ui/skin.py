"""Knob skins: SVG artwork plus the point the knob rotates around."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QByteArray
from PySide6.QtSvg import QSvgRenderer

from qknob.utils.json_loader import SettingsError, read_json_dict
from qknob.utils.log_util import log_io
from qknob.utils.resource_paths import skin_dir

logger = logging.getLogger(__name__)

SKIN_MANIFEST = "skin.json"
BASE_ELEMENT = "base"
KNOB_ELEMENT = "knob"


@dataclass(frozen=True)
class Skin:
    """
    SVG markup of a knob and its rotation center.

    The SVG must contain an element with id "knob" that is rotated by the dial
    angle around (knob_x, knob_y), in SVG user units. An optional "base"
    element is drawn underneath without rotation.
    """
    svg: str
    knob_x: float
    knob_y: float
    name: str = "custom"

    @property
    def center(self) -> tuple[float, float]:
        return self.knob_x, self.knob_y

    def renderer(self) -> QSvgRenderer:
        """
        Create a renderer for this skin.

        :raises SettingsError: if the SVG cannot be parsed or has no knob element
        """
        renderer = QSvgRenderer(QByteArray(self.svg.encode("utf-8")))
        if not renderer.isValid():
            raise SettingsError(f"Skin '{self.name}' is not a valid SVG document.")
        if not renderer.elementExists(KNOB_ELEMENT):
            raise SettingsError(f"Skin '{self.name}' has no '{KNOB_ELEMENT}' element.")
        return renderer


def _coordinate(manifest: dict, key: str, path: Path) -> float:
    try:
        return float(manifest[key])
    except KeyError as e:
        raise SettingsError(f"{path}: '{key}' is required") from e
    except (TypeError, ValueError) as e:
        raise SettingsError(f"{path}: '{key}' must be a number, got {manifest[key]!r}") from e


@log_io()
def load_skin(path: Path, *, strict: bool = False,
              warnings: Optional[list[str]] = None) -> Skin:
    """
    Load a skin directory holding skin.json and the SVG it names.

    skin.json format:
    {
        "svg": "knob.svg",
        "knob_x": 50,
        "knob_y": 50
    }

    :param path: Skin directory
    :param strict: Raise SettingsError on any problem instead of falling back
    :param warnings: Receives the fallback reasons in non-strict mode
    :return: The loaded skin, or the default skin after a non-strict failure
    """
    warnings = warnings if warnings is not None else []
    path = Path(path)
    manifest_path = path / SKIN_MANIFEST
    manifest = read_json_dict(manifest_path, strict=strict, warnings=warnings, logger=logger)
    if manifest is None:
        return default_skin()

    try:
        svg_name = manifest.get("svg")
        if not isinstance(svg_name, str) or not svg_name:
            raise SettingsError(f"{manifest_path}: 'svg' must name the SVG file")
        knob_x = _coordinate(manifest, "knob_x", manifest_path)
        knob_y = _coordinate(manifest, "knob_y", manifest_path)
        try:
            svg = (path / svg_name).read_text(encoding="utf-8")
        except OSError as e:
            raise SettingsError(f"Failed to read skin SVG {path / svg_name}: ({e})") from e
        skin = Skin(svg=svg, knob_x=knob_x, knob_y=knob_y, name=path.name)
        skin.renderer()
    except SettingsError as e:
        if strict:
            raise
        warnings.append(str(e))
        logger.warning("%s; using the default skin", e)
        return default_skin()

    return skin


def default_skin() -> Skin:
    """The skin bundled with the package."""
    return load_skin(skin_dir("default"), strict=True)


def load_named_skin(name: str, *, warnings: Optional[list[str]] = None) -> Skin:
    """Load a bundled skin by directory name, falling back to the default one."""
    return load_skin(skin_dir(name), strict=False, warnings=warnings)
