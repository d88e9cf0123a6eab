"""
Testes das configurações em YAML
"""

import pytest

from core import config


def test_missing_file_gives_defaults(tmp_path):
    settings = config.get_settings(str(tmp_path / "nope.yaml"))
    assert settings == config.DEFAULTS


def test_save_and_load_roundtrip(tmp_path):
    path = str(tmp_path / "sub" / "config.yaml")
    config.save_config({"server_port": 4000, "api_base_url": "http://10.0.0.5:4000/api"}, path)
    assert config.load_config(path) == {"server_port": 4000, "api_base_url": "http://10.0.0.5:4000/api"}


def test_env_variable_selects_file(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("low_stock_threshold: 8\nrevenue_month_mode: calendar\n", encoding="utf-8")
    monkeypatch.setenv("REFLECT_CONFIG", str(path))

    settings = config.get_settings()

    assert config.get_config_path() == str(path)
    assert settings["low_stock_threshold"] == 8
    assert settings["revenue_month_mode"] == "calendar"
    assert settings["health_timeout"] == 2.0


def test_unknown_month_mode_falls_back(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("revenue_month_mode: fiscal\n", encoding="utf-8")
    assert config.get_settings(str(path))["revenue_month_mode"] == "all"


def test_non_mapping_file_is_ignored(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    assert config.load_config(str(path)) == {}


def test_set_low_stock_threshold_keeps_other_keys(tmp_path):
    path = str(tmp_path / "config.yaml")
    config.save_config({"server_port": 4000}, path)

    config.set_low_stock_threshold("7", path)

    assert config.load_config(path) == {"server_port": 4000, "low_stock_threshold": 7}


def test_set_low_stock_threshold_rejects_negative(tmp_path):
    path = str(tmp_path / "config.yaml")
    with pytest.raises(ValueError):
        config.set_low_stock_threshold(-1, path)
    assert config.load_config(path) == {}
