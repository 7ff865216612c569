import faulthandler
import logging
import sys
import time
from pathlib import Path

import pytest
from PySide6.QtCore import QtMsgType


@pytest.fixture(autouse=True)
def _isolate_logging():
    """Reset root handlers after each test so configurations do not leak."""
    saved_hook = sys.excepthook
    yield
    sys.excepthook = saved_hook
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.setLevel(logging.WARNING)


@pytest.fixture
def tmp_log_dir(tmp_path: Path):
    d = tmp_path / "logs"
    d.mkdir(parents=True, exist_ok=True)
    return d


@pytest.fixture
def module(tmp_log_dir, monkeypatch):
    """logging_setup with default_log_dir pointed at a temporary directory."""
    from qknob.app import logging_setup
    monkeypatch.setattr(logging_setup, "default_log_dir", lambda app_name: tmp_log_dir)
    return logging_setup


def _read_text(path: Path) -> str:
    """Short retry in case the listener is still writing."""
    for _ in range(10):
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            time.sleep(0.02)
    return path.read_text(encoding="utf-8", errors="replace")


def test_info_level_writes_file(module, tmp_log_dir):
    logs = module.LogSystem.from_levels("qknob", root_level=logging.INFO, console_level=logging.INFO)
    logger = logging.getLogger("qknob.test")

    logger.debug("debug should NOT appear")
    logger.info("info should appear")
    logger.warning("warning should appear")
    logs.stop()

    log_file = tmp_log_dir / "qknob.log"
    assert log_file.exists()

    text = _read_text(log_file)
    assert "info should appear" in text
    assert "warning should appear" in text
    assert "debug should NOT appear" not in text
    assert " INFO " in text
    assert "qknob.test" in text


def test_debug_level_outputs_debug(module, tmp_log_dir):
    logs = module.LogSystem.from_levels("qknob", root_level="DEBUG", console_level=logging.DEBUG)
    logger = logging.getLogger("qknob.core.drag_session")

    logger.debug("debug visible")
    logger.info("info visible")
    logs.stop()

    text = _read_text(tmp_log_dir / "qknob.log")
    assert "debug visible" in text
    assert "info visible" in text


def test_queue_listener_flush_on_stop(module, tmp_log_dir):
    logs = module.LogSystem.from_levels("qknob", root_level=logging.INFO)
    logger = logging.getLogger("qknob.bulk")

    for i in range(200):
        logger.info("line %04d", i)
    logs.stop()
    logs.stop()  # second stop is a no-op

    text = _read_text(tmp_log_dir / "qknob.log")
    assert "line 0000" in text
    assert "line 0199" in text
    assert "line 0200" not in text


def test_rotation_by_small_max_bytes(module, tmp_log_dir, monkeypatch):
    monkeypatch.setenv("QKNOB_LOG_BACKUP_COUNT", "2")
    orig_build = module.build_config

    def tiny_build_config(app_name, root_level=None, console_level=None, log_dir=None):
        cfg = orig_build(app_name, root_level, console_level, log_dir)
        cfg["_file_settings"]["maxBytes"] = 1000
        return cfg

    monkeypatch.setattr(module, "build_config", tiny_build_config)

    logs = module.LogSystem.from_levels("qknob", root_level=logging.INFO)
    logger = logging.getLogger("qknob.rotate")
    payload = "X" * 180
    for i in range(50):
        logger.info("i=%03d %s", i, payload)
    logs.stop()

    assert (tmp_log_dir / "qknob.log").exists()
    assert (tmp_log_dir / "qknob.log.1").exists()
    assert not (tmp_log_dir / "qknob.log.3").exists()


def test_apply_logging_policy_production(module, tmp_log_dir):
    class Settings:
        run_mode = module.RunMode.PRODUCTION
        logging_level = "WARNING"

    logs = module.LogSystem.from_levels("qknob", root_level=logging.INFO)
    module.apply_logging_policy(logs, Settings())
    assert logging.getLogger().level == logging.DEBUG
    assert logs._console_handler.level == logging.WARNING
    logs.stop()


def test_startup_logging_installs_excepthook(module, tmp_log_dir):
    paths = module.setup_startup_logging("qknob", log_dir=tmp_log_dir)
    assert paths.log_file == tmp_log_dir / "qknob.log"

    try:
        raise RuntimeError("callback exploded")
    except RuntimeError:
        sys.excepthook(*sys.exc_info())

    for h in logging.getLogger().handlers:
        h.flush()
    faulthandler.disable()
    logging.getLogger()._qknob_crash_fh.close()

    text = _read_text(paths.log_file)
    assert "Uncaught exception" in text
    assert "callback exploded" in text


@pytest.mark.parametrize("msg_type, level", [
    (QtMsgType.QtDebugMsg, logging.DEBUG),
    (QtMsgType.QtInfoMsg, logging.INFO),
    (QtMsgType.QtWarningMsg, logging.WARNING),
    (QtMsgType.QtCriticalMsg, logging.ERROR),
])
def test_qt_messages_keep_their_level(module, caplog, msg_type, level):
    caplog.set_level(logging.DEBUG, logger="Qt")
    module.qt_message_handler(msg_type, None, "from qt")
    record = caplog.records[-1]
    assert record.name == "Qt"
    assert record.levelno == level
    assert record.getMessage() == "from qt"
