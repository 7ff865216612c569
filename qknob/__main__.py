# NOTE:
# Startup diagnostics (logging / Qt message handler) must run
#  before the QApplication instance is created.
import logging
import sys

from PySide6 import QtWidgets

from qknob.app.app_settings_manager import AppSettingsManager
from qknob.app.logging_setup import (
    LogSystem,
    apply_logging_policy,
    install_qt_message_handler,
    setup_startup_logging,
)
from qknob.ui.error_notifier import ErrorNotifier
from qknob.ui.mainwindow import MainWindow

logger = logging.getLogger(__name__)


def main():
    paths = setup_startup_logging(app_name="qknob")
    logs = LogSystem("qknob", log_dir=paths.log_dir)
    install_qt_message_handler()

    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication(sys.argv)

    logger.info("App start")
    settings_mgr = AppSettingsManager()
    apply_logging_policy(logs, settings_mgr)
    ErrorNotifier.configure(settings_mgr)

    main_window = MainWindow(settings_mgr)
    main_window.show()

    # stop the log listener when Qt quits
    app.aboutToQuit.connect(logs.stop)
    try:
        rc = app.exec()
        logger.info("App exit (rc=%s)", rc)
        sys.exit(rc)
    finally:
        logs.stop()


if __name__ == "__main__":
    main()
