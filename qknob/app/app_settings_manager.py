from __future__ import annotations
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Dict
from PySide6.QtCore import QSettings
import logging

from qknob.core.knob_options import KnobOptions, validate_unlock_distance

logger = logging.getLogger(__name__)


class RunMode(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    VERBOSE = "verbose"

    def __str__(self):
        return self.value
    def __repr__(self):
        return self.value


# ----------------------
# Defaults
# ----------------------
DEFAULTS: Dict[str, Any] = {
    "general": {
        "run_mode": RunMode.DEVELOPMENT.value,
        "logging_level": "INFO",  # "DEBUG", "INFO", "WARNING", "ERROR"
    },
    "knob": {
        "precise_mode": True,
        "unlock_distance": 100.0,
        "skin": "default",
    },
}

MAX_UNLOCK_DISTANCE = 1000.0

# ---------------------
# Data model
# ---------------------
@dataclass
class GeneralConfig:
    run_mode: RunMode = RunMode.PRODUCTION
    logging_level: str = "INFO"

@dataclass
class KnobConfig:
    precise_mode: bool = True
    unlock_distance: float = 100.0
    skin: str = "default"

@dataclass
class AppSettingsData:
    general: GeneralConfig = field(default_factory=GeneralConfig)
    knob: KnobConfig = field(default_factory=KnobConfig)

# ----------------------
# Utility
# ----------------------
def _truthy(s: str) -> bool:
    return s.strip().lower() in ("1", "true", "yes", "on")


def _validate_run_mode(v: Any) -> RunMode:
    if isinstance(v, RunMode):
        return v
    mode = str(v).strip().lower()
    try:
        return RunMode(mode)
    except ValueError:
        return RunMode(DEFAULTS["general"]["run_mode"])

def _validate_logging_level(v: str) -> str:
    v = str(v).upper()
    return v if v in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"

def _validate_precise_mode(v: Any) -> bool:
    # QSettings INI hands booleans back as "true"/"false"
    if isinstance(v, bool):
        return v
    return _truthy(str(v))

def _validate_unlock_distance(v: Any) -> float:
    try:
        f = validate_unlock_distance(v)
    except (TypeError, ValueError):
        return DEFAULTS["knob"]["unlock_distance"]
    return f if f <= MAX_UNLOCK_DISTANCE else DEFAULTS["knob"]["unlock_distance"]

def _validate_skin(v: Any) -> str:
    name = str(v).strip()
    if not name or "/" in name or "\\" in name or name.startswith("."):
        return DEFAULTS["knob"]["skin"]
    return name


# ---------------------
# AppSettingManager
# ---------------------
class AppSettingsManager:
    """
    Manages the general application settings.
    Starts from DEFAULTS in code and applies the QSettings overrides.
    Values are validated on load; out-of-range values fall back to the defaults.
    set_* writes to QSettings immediately.
    """
    def __init__(self, org_domain: str = "qknob.org", app_name: str = "QKnob"):
        self._settings = QSettings(org_domain, app_name)
        self._data = self._load_effective()

    # read
    @property
    def data(self) -> AppSettingsData:
        return self._data

    @property
    def run_mode(self) -> RunMode:
        return self._data.general.run_mode

    @property
    def dev_mode(self) -> bool:
        return self.run_mode is RunMode.DEVELOPMENT

    @property
    def logging_level(self) -> str:
        return self._data.general.logging_level

    @property
    def precise_mode(self) -> bool:
        return self._data.knob.precise_mode

    @property
    def unlock_distance(self) -> float:
        return self._data.knob.unlock_distance

    @property
    def skin(self) -> str:
        return self._data.knob.skin

    # write
    def set_run_mode(self, v: str | RunMode) -> None:
        mode = _validate_run_mode(v)
        self._settings.setValue("general/run_mode", mode.value)
        self._data.general.run_mode = mode

    def set_logging_level(self, v: str) -> None:
        level = _validate_logging_level(v)
        self._settings.setValue("general/logging_level", level)
        self._data.general.logging_level = level

    def set_precise_mode(self, v: bool) -> None:
        enabled = _validate_precise_mode(v)
        self._settings.setValue("knob/precise_mode", enabled)
        self._data.knob.precise_mode = enabled

    def set_unlock_distance(self, v: float) -> None:
        d = _validate_unlock_distance(v)
        self._settings.setValue("knob/unlock_distance", d)
        self._data.knob.unlock_distance = d

    def set_skin(self, v: str) -> None:
        name = _validate_skin(v)
        self._settings.setValue("knob/skin", name)
        self._data.knob.skin = name

    def knob_options(self, **overrides: Any) -> KnobOptions:
        """Build KnobOptions from the knob section; keyword arguments win."""
        params: dict[str, Any] = {
            "precise_mode": self.precise_mode,
            "unlock_distance": self.unlock_distance,
        }
        params.update(overrides)
        return KnobOptions(**params)

    # Reset
    def reset_all_to_default(self) -> None:
        """Remove every user setting."""
        self._settings.remove("general")
        self._settings.remove("knob")
        self._data = self._load_effective()

    def reset_section(self, section: str) -> None:
        """Reset one section to the defaults."""
        if section not in ("general", "knob"):
            raise ValueError(f"Invalid section: {section}")
        self._settings.remove(section)
        self._data = self._load_effective()

    def to_dict(self) -> dict[str, Any]:
        data = {
            "general": asdict(self._data.general),
            "knob": asdict(self._data.knob),
        }
        data["general"]["run_mode"] = self._data.general.run_mode.value
        return data

    # ---------- internals ---------------
    def _load_effective(self) -> AppSettingsData:
        """Apply the QSettings overrides to DEFAULTS, validate and build the model."""
        merged = self._apply_qsettings_overrides(DEFAULTS)
        return self._make_model_from(merged)

    def _apply_qsettings_overrides(self, base: dict[str, Any]) -> dict[str, Any]:
        """
        Read the dict based settings and apply QSettings overrides.
        :param base:
        :return: apply QSettings overrides
        """
        # general
        g = dict(base.get("general", {}))
        v = self._settings.value("general/run_mode", None)
        if v is not None:
            g["run_mode"] = _validate_run_mode(v).value
        v = self._settings.value("general/logging_level", None)
        if v is not None:
            g["logging_level"] = _validate_logging_level(v)

        # knob
        k = dict(base.get("knob", {}))
        v = self._settings.value("knob/precise_mode", None)
        if v is not None:
            k["precise_mode"] = _validate_precise_mode(v)
        v = self._settings.value("knob/unlock_distance", None)
        if v is not None:
            k["unlock_distance"] = _validate_unlock_distance(v)
        v = self._settings.value("knob/skin", None)
        if v is not None:
            k["skin"] = _validate_skin(v)

        return {"general": g, "knob": k}

    def _make_model_from(self, merged: dict[str, Any]) -> AppSettingsData:
        """
        making model from merged dict and returning merged AppSettingsData
        :param merged:
        :return: merged AppSettingsData
        """
        g = merged.get("general", {})
        k = merged.get("knob", {})
        return AppSettingsData(
            general=GeneralConfig(
                run_mode=_validate_run_mode(g.get("run_mode", DEFAULTS["general"]["run_mode"])),
                logging_level=_validate_logging_level(g.get("logging_level", DEFAULTS["general"]["logging_level"])),
            ),
            knob=KnobConfig(
                precise_mode=_validate_precise_mode(k.get("precise_mode", DEFAULTS["knob"]["precise_mode"])),
                unlock_distance=_validate_unlock_distance(k.get("unlock_distance", DEFAULTS["knob"]["unlock_distance"])),
                skin=_validate_skin(k.get("skin", DEFAULTS["knob"]["skin"])),
            ),
        )
