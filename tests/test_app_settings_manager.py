import pytest

from qknob.app.app_settings_manager import AppSettingsManager, RunMode


def test_defaults(tmp_settings):
    mgr = AppSettingsManager()
    assert mgr.run_mode is RunMode.DEVELOPMENT
    assert mgr.dev_mode is True
    assert mgr.logging_level == "INFO"
    assert mgr.precise_mode is True
    assert mgr.unlock_distance == 100.0
    assert mgr.skin == "default"


def test_set_values_are_persisted(tmp_settings):
    mgr = AppSettingsManager()
    mgr.set_run_mode("production")
    mgr.set_precise_mode(False)
    mgr.set_unlock_distance(42)
    mgr.set_logging_level("debug")

    reloaded = AppSettingsManager()
    assert reloaded.run_mode is RunMode.PRODUCTION
    assert reloaded.precise_mode is False
    assert reloaded.unlock_distance == 42.0
    assert reloaded.logging_level == "DEBUG"


@pytest.mark.parametrize("stored", ["-5", "nan", "abc", "5000"])
def test_invalid_unlock_distance_falls_back(tmp_settings, stored):
    tmp_settings.setValue("knob/unlock_distance", stored)
    tmp_settings.sync()
    assert AppSettingsManager().unlock_distance == 100.0


def test_invalid_values_fall_back(tmp_settings):
    tmp_settings.setValue("general/run_mode", "turbo")
    tmp_settings.setValue("general/logging_level", "LOUD")
    tmp_settings.setValue("knob/skin", "../etc")
    tmp_settings.sync()
    mgr = AppSettingsManager()
    assert mgr.run_mode is RunMode.DEVELOPMENT
    assert mgr.logging_level == "INFO"
    assert mgr.skin == "default"


def test_reset_section(tmp_settings):
    mgr = AppSettingsManager()
    mgr.set_unlock_distance(10)
    mgr.set_run_mode(RunMode.VERBOSE)
    mgr.reset_section("knob")
    assert mgr.unlock_distance == 100.0
    assert mgr.run_mode is RunMode.VERBOSE

    mgr.reset_all_to_default()
    assert mgr.run_mode is RunMode.DEVELOPMENT

    with pytest.raises(ValueError):
        mgr.reset_section("view")


def test_knob_options_from_settings(tmp_settings):
    mgr = AppSettingsManager()
    mgr.set_precise_mode(False)
    mgr.set_unlock_distance(30)
    opts = mgr.knob_options(min=-10, max=10)
    assert opts.precise_mode is False
    assert opts.unlock_distance == 30.0
    assert (opts.min, opts.max) == (-10, 10)


def test_to_dict(tmp_settings):
    data = AppSettingsManager().to_dict()
    assert data["general"]["run_mode"] == "development"
    assert data["knob"] == {"precise_mode": True, "unlock_distance": 100.0, "skin": "default"}


def test_zero_unlock_distance_is_kept(tmp_settings):
    mgr = AppSettingsManager()
    mgr.set_unlock_distance(0)
    assert mgr.unlock_distance == 0.0
    assert AppSettingsManager().unlock_distance == 0.0
    assert mgr.knob_options().unlock_distance == 0.0
