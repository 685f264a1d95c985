# Purpose: Tests for the settings loader (defaults, overrides, caching) and logging configuration.

import logging

import pytest

from core import settings_loader
from core.config import build_logging_config
from core.settings_loader import (
    get_anchor_days,
    get_app_config,
    get_calculation_rules,
    get_flat_tax_rate,
    get_macro_projection_settings,
    get_regressive_table,
    load_settings,
    reload_settings,
)


def test_project_settings_file_loads():
    settings = load_settings()
    assert settings["app_config"]["default_mode"] == "natural"
    assert get_anchor_days()["fundo-cetipado"] == 10
    assert get_flat_tax_rate() == 0.15
    assert get_calculation_rules()["cri-cra"]["indexed"]["granularity"] == "monthly"
    assert get_macro_projection_settings()["reference"][2028] == 10.0


def test_regressive_table_sorted():
    table, floor_rate = get_regressive_table()
    assert table == [(180, 0.225), (360, 0.20), (720, 0.175)]
    assert floor_rate == 0.15


def test_missing_file_falls_back_to_defaults(monkeypatch, tmp_path, caplog):
    monkeypatch.setattr(settings_loader, "SETTINGS_FILE", tmp_path / "missing.yaml")
    reload_settings()
    with caplog.at_level(logging.WARNING, logger="core.settings_loader"):
        settings = load_settings()
    assert settings["comparison_config"]["anchor_days"]["default"] == 15
    assert "not found" in caplog.text


def test_overrides_are_merged_over_defaults(monkeypatch, tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("comparison_config:\n  anchor_days:\n    fundo-cetipado: 15\n  flat_tax_rate: 0.2\n")
    monkeypatch.setattr(settings_loader, "SETTINGS_FILE", path)
    reload_settings()
    assert get_anchor_days() == {"fundo-cetipado": 15, "default": 15}
    assert get_flat_tax_rate() == 0.2
    assert get_app_config()["log_level"] == "INFO"


def test_non_mapping_settings_rejected(monkeypatch, tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- just\n- a list\n")
    monkeypatch.setattr(settings_loader, "SETTINGS_FILE", path)
    reload_settings()
    with pytest.raises(ValueError):
        load_settings()


def test_build_logging_config(tmp_path):
    config = build_logging_config("warning")
    assert config["handlers"]["console"]["level"] == "WARNING"
    assert "file" not in config["handlers"]

    log_file = str(tmp_path / "run.log")
    config = build_logging_config("INFO", log_file)
    assert config["handlers"]["file"]["filename"] == log_file
    assert config["loggers"][""]["handlers"] == ["console", "file"]
    assert config["loggers"]["bond_comparison.cashflows"]["level"] == "DEBUG"
