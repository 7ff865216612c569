import copy
import logging

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QLabel

from qknob.app.app_settings_manager import AppSettingsManager
from qknob.core.drag_session import DragSnapshot
from qknob.status import STATUS_FIELDS, StatusField
from qknob.ui.error_notifier import ErrorNotifier
from qknob.ui.knob_widget import KnobWidget
from qknob.ui.skin import load_named_skin
from qknob.utils.log_util import log_io

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Demo window: one knob and a status bar showing its state."""

    def __init__(self, settings_mgr: AppSettingsManager | None = None):
        """
        Initialize the main window.

        :param settings_mgr: Application settings manager.
        """
        super().__init__()

        self.setting = settings_mgr or AppSettingsManager()

        # Status fields
        self.status_fields: dict[str, StatusField] = {
            k: copy.deepcopy(v) for k, v in STATUS_FIELDS.items()
        }
        self._status_label: dict[str, QLabel] = {}

        self.setWindowTitle("QKnob")
        self._setup_ui()
        self._setup_menus()
        self._setup_status_bar()
        self._refresh_status(self.knob.controller.snapshot)

    def _setup_ui(self) -> None:
        """Setup the main UI layout"""
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)

        warnings: list[str] = []
        skin = load_named_skin(self.setting.skin, warnings=warnings)
        for msg in warnings:
            ErrorNotifier.instance().notify(title="Skin", msg=msg, severity="warning")

        self.knob = KnobWidget(self.setting.knob_options(), skin=skin, parent=central_widget)
        main_layout.addWidget(self.knob)
        self.setGeometry(100, 100, 320, 360)

        self.knob.controller.add_snapshot_changed_callback(self._refresh_status)
        self.knob.valueChanged.connect(self._on_value_changed)

    def _setup_menus(self) -> None:
        """Create the menus for the main window."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        file_menu.addAction("&Quit", self.close)

        knob_menu = menubar.addMenu("&Knob")
        self.precise_action = QAction("&Precise mode", self)
        self.precise_action.setCheckable(True)
        self.precise_action.setChecked(self.setting.precise_mode)
        self.precise_action.toggled.connect(self.set_precise_mode)
        knob_menu.addAction(self.precise_action)
        knob_menu.addSeparator()
        knob_menu.addAction("&Reset value", self.reset_value)

    def _setup_status_bar(self) -> None:
        """Setup the status bar."""
        status_bar = self.statusBar()
        for key in self.status_fields:
            label = QLabel("", self)
            status_bar.addPermanentWidget(label)
            self._status_label[key] = label

    # =====================================================
    # Menu Actions
    # =====================================================

    @log_io(level=logging.INFO)
    def set_precise_mode(self, enabled: bool) -> None:
        self.setting.set_precise_mode(enabled)
        self.knob.controller.set_precise_mode(enabled)

    @log_io(level=logging.INFO)
    def reset_value(self) -> None:
        self.knob.setValue(self.knob.controller.options.default_value)

    # =====================================================
    # Signal Handlers
    # =====================================================

    def _on_value_changed(self, value: float) -> None:
        logger.debug("Knob value: %s", value)

    def _refresh_status(self, snapshot: DragSnapshot) -> None:
        controller = self.knob.controller
        self._update_status("value", controller.value)
        self._update_status("angle", controller.angle)
        self._update_status("drag_distance", snapshot.drag_distance)
        self._update_status("state", controller.state)

    def _update_status(self, key: str, value) -> None:
        """Update status bar label."""
        label = self._status_label.get(key)
        field = self.status_fields.get(key)
        if label is None or field is None:
            return

        field.value = value
        try:
            label.setText(field.text())
        except Exception as e:
            logger.warning(f"Error formatting status field {key}: {e}")
            label.setText(str(value))
