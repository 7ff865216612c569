import pytest

from qknob.app.app_settings_manager import AppSettingsManager
from qknob.core.drag_session import DragState
from qknob.status import STATUS_FIELDS, StatusField, format_state
from qknob.ui.error_notifier import ErrorNotifier
from qknob.ui.mainwindow import MainWindow


@pytest.fixture
def no_popups(monkeypatch):
    """Collect scheduled dialogs instead of showing them."""
    shown = []

    class FakeTimer:
        @staticmethod
        def singleShot(msec, fn):
            shown.append(fn)

    monkeypatch.setattr("qknob.ui.error_notifier.QTimer", FakeTimer)
    monkeypatch.setattr(ErrorNotifier, "_instance", None)
    return shown


@pytest.fixture
def window(qtbot, tmp_settings, no_popups):
    w = MainWindow(AppSettingsManager())
    qtbot.addWidget(w)
    return w


def test_status_field_text():
    field = StatusField(label="Value", fmt="{:.2f}", value=1.5)
    assert field.text() == "Value: 1.50"
    custom = StatusField(label="Gesture", formatter=format_state, value=DragState.LOCKED)
    assert custom.text() == "Gesture: locked"


@pytest.mark.parametrize("state, text", [
    (DragState.IDLE, "idle"),
    (DragState.STARTED, "dragging"),
    (DragState.LOCKED, "locked"),
    (DragState.ACTIVE, "dragging"),
])
def test_format_state(state, text):
    assert format_state(state) == text


def test_window_shows_initial_status(window):
    assert set(window.status_fields) == set(STATUS_FIELDS)
    assert window._status_label["value"].text() == "Value: 0.00"
    assert window._status_label["state"].text() == "Gesture: idle"


def test_status_follows_value(window):
    window.knob.setValue(25)
    assert window._status_label["value"].text() == "Value: 25.00"
    assert window._status_label["angle"].text() == "Angle: 90.0°"


def test_precise_mode_action_updates_settings_and_knob(window):
    assert window.precise_action.isChecked()
    window.precise_action.setChecked(False)
    assert window.knob.controller.precise_mode is False
    assert AppSettingsManager().precise_mode is False


def test_reset_value(window):
    window.knob.setValue(60)
    window.reset_value()
    assert window.knob.value() == 0


def test_error_notifier_dedups(no_popups):
    notifier = ErrorNotifier.instance()
    assert notifier.notify("Skin", "broken", severity="warning") is True
    assert notifier.notify("Skin", "broken", severity="warning") is False
    assert notifier.notify("Skin", "other", severity="info") is True
    assert len(no_popups) == 2


def test_error_notifier_configure_uses_dev_mode(no_popups, tmp_settings):
    notifier = ErrorNotifier.configure(AppSettingsManager())
    assert notifier.dev_mode is True
