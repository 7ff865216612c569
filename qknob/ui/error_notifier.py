from __future__ import annotations
import time, traceback, logging
from typing import Optional
from PySide6.QtWidgets import QApplication, QMessageBox, QErrorMessage
from PySide6.QtCore import QObject, QTimer, Qt

from qknob.utils.json_loader import truthy_env


logger = logging.getLogger(__name__)


class ErrorNotifier(QObject):
    """
    Logs errors and warnings and shows them to the user.

    Errors open a message box (with the traceback as detail text), warnings
    go to a QErrorMessage dialog and anything else to the active window's
    status bar. The same message is shown at most once per dedup_seconds.

    Usage:
    >>> ErrorNotifier.instance().notify("Skin", "Skin could not be loaded", severity="warning")
    """
    _instance: Optional[ErrorNotifier] = None

    def __init__(self):
        super().__init__()
        self.dev_mode = truthy_env("QKNOB_DEV")
        self._last_shown: dict[str, float] = {}  # key -> timestamp
        self._suppress_window: QErrorMessage | None = None

    @classmethod
    def instance(cls) -> ErrorNotifier:
        if cls._instance is None:
            cls._instance = ErrorNotifier()
        return cls._instance

    @classmethod
    def configure(cls, settings) -> ErrorNotifier:
        """Take dev_mode from the application settings."""
        notifier = cls.instance()
        notifier.dev_mode = notifier.dev_mode or bool(getattr(settings, "dev_mode", False))
        return notifier

    def notify(self,
               title: str,
               msg: str,
               *,
               detail: Optional[str] = None,
               exc_info: Optional[tuple] = None,
               severity: str = "error",
               dedup_seconds: float = 2.0,
               ) -> bool:
        """
        Log and show a message.

        :return: False when the message was suppressed as a duplicate
        """
        if exc_info:
            logger.error("%s: %s", title, msg, exc_info=exc_info)
        else:
            if severity in ("error", "critical"):
                logger.error("%s: %s", title, msg)
            elif severity == "warning":
                logger.warning("%s: %s", title, msg)
            else:
                logger.info("%s: %s", title, msg)

        now = time.monotonic()
        key = f"{severity}:{title}:{msg}"
        last = self._last_shown.get(key)
        if last is not None and now - last < dedup_seconds:
            return False
        self._last_shown[key] = now

        # execute on GUI thread
        def _show():
            if severity in ("error", "critical"):
                box = QMessageBox()
                box.setIcon(QMessageBox.Critical if severity == "critical"
                            else QMessageBox.Warning)
                box.setWindowTitle(title)
                box.setText(msg)

                det = detail
                if exc_info and not det:
                    det = "".join(traceback.format_exception(*exc_info))
                if det:
                    box.setDetailedText(det)
                    if self.dev_mode:
                        box.setTextInteractionFlags(Qt.TextSelectableByMouse)
                box.exec()
            elif severity == "warning":
                if self._suppress_window is None:
                    self._suppress_window = QErrorMessage()
                self._suppress_window.showMessage(f"{title}: {msg}")
            else:
                app: QApplication = QApplication.instance()
                w = app.activeWindow() if app else None
                if hasattr(w, "statusBar"):
                    w.statusBar().showMessage(f"{title}: {msg}", 5000)

        QTimer.singleShot(0, _show)
        return True
