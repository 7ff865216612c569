"""Authoritative knob value under controlled / uncontrolled ownership."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class OwnershipMode(str, Enum):
    CONTROLLED = "controlled"
    UNCONTROLLED = "uncontrolled"

    def __str__(self):
        return self.value


class ValueStore:
    """
    Holds the current domain value.

    - Controlled: the value belongs to the caller. write() only notifies; the
      owner feeds the value back with set_external_value().
    - Uncontrolled: the store keeps a local value seeded from default_value.

    The mode is decided once, here, from whether an explicit value was given.
    Change callbacks are caller code and their exceptions are not caught.
    """

    def __init__(self,
                 value: Optional[float] = None,
                 default_value: float = 0.0,
                 on_change: Optional[Callable[[float], None]] = None):
        if value is None:
            self._mode = OwnershipMode.UNCONTROLLED
            self._local_value: float = default_value
            self._external_value: float | None = None
        else:
            self._mode = OwnershipMode.CONTROLLED
            self._local_value = default_value
            self._external_value = value

        self._on_change_callbacks: list[Callable[[float], None]] = []
        if on_change is not None:
            self._on_change_callbacks.append(on_change)

        logger.debug("ValueStore created (%s, value=%s)", self._mode, self.read())

    @property
    def mode(self) -> OwnershipMode:
        return self._mode

    @property
    def controlled(self) -> bool:
        return self._mode is OwnershipMode.CONTROLLED

    def read(self) -> float:
        """Return the external value if controlled, otherwise the local one."""
        return self._external_value if self.controlled else self._local_value

    def write(self, value: float) -> None:
        """
        Store a new value coming from the dial or the companion input.

        Always forwards the value to the change callbacks, whatever the mode.
        """
        if not self.controlled:
            self._local_value = value
        for callback in list(self._on_change_callbacks):
            callback(value)

    def set_external_value(self, value: float) -> bool:
        """
        Feed back the owner's value in controlled mode.

        :return: True if the value was taken, False in uncontrolled mode
        """
        if not self.controlled:
            logger.warning("External value %s ignored: store is uncontrolled", value)
            return False
        self._external_value = value
        return True

    def add_change_callback(self, callback: Callable[[float], None]) -> None:
        """
        Add a callback for value changes.

        Callback signature: callback(value: float) -> None
        """
        self._on_change_callbacks.append(callback)

    def remove_change_callback(self, callback: Callable[[float], None]) -> None:
        self._on_change_callbacks.remove(callback)
