from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional


class SettingsError(RuntimeError):
    """Raised when strict loading of a settings or skin file fails (dev/CI)."""


def truthy_env(name: str) -> bool:
    """Return True if environment variable is truthy (non-empty, non-zero, etc.)."""
    v = os.environ.get(name, "")
    return v.strip().lower() in ("1", "true", "yes", "on")


def _fail(
        msg: str,
        *,
        strict: bool,
        warnings: list[str],
        logger: Any = None,
        exc: Exception | None = None,
        level: str = "warning",
) -> Optional[dict[str, Any]]:
    """Centralized failure handler: records a human-readable warning message, logs it
    at the requested level (optional with exception context), and raises
    SettingsError when strict=True. Returns None in non-strict mode to indicate fallback.
    """
    if strict:
        raise SettingsError(msg) from exc
    warnings.append(msg)
    if logger is not None:
        if exc is not None and level == "exception":
            logger.exception(msg)
        else:
            getattr(logger, level, logger.warning)(msg)
    return None


def _parse_json(text: str, path: Path) -> dict[str, Any]:
    """Parse JSON text and ensure the top-level value is an object."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise SettingsError(f"JSON must be an object at top-level: {path}")
    return data


def read_json_dict(
        path: Path,
        *,
        strict: bool,
        warnings: list[str],
        logger: Any = None,
) -> Optional[dict[str, Any]]:
    """
    Read JSON file and return dict.

    Behavior:
    - strict=True: missing/broken/non-dict -> raise SettingsError
    - strict=False: return None and record warnings (and log if logger given)
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        return _fail(f"JSON file missing: {path}",
                     strict=strict, warnings=warnings, logger=logger, exc=e)
    except OSError as e:
        return _fail(f"Failed to read JSON from {path}: ({e})",
                     strict=strict, warnings=warnings, logger=logger, exc=e,
                     level="exception")

    try:
        return _parse_json(text, path)
    except json.JSONDecodeError as e:
        return _fail(f"Failed to parse JSON from {path}: ({e})",
                     strict=strict, warnings=warnings, logger=logger, exc=e)
    except SettingsError as e:
        return _fail(str(e), strict=strict, warnings=warnings, logger=logger, exc=e, level="error")
