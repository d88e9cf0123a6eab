"""
Testes do ponto de entrada (painel no terminal)
"""

import pytest

import ReflectManager


@pytest.fixture
def quiet_logging(monkeypatch, tmp_path):
    logs = tmp_path / "logs"
    monkeypatch.setattr(ReflectManager, "setup_logging", lambda: str(logs / "test.log"))
    monkeypatch.setattr(ReflectManager, "log_startup", lambda path: None)


def test_format_money():
    assert ReflectManager.format_money(12000) == "12,000.00 DH"


def test_no_command_prints_help(capsys):
    assert ReflectManager.main([]) == 1
    assert "dashboard" in capsys.readouterr().out


def test_dashboard_offline(quiet_logging, tmp_path, monkeypatch, capsys):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "api_base_url: http://127.0.0.1:1/api\n"
        "health_timeout: 0.5\n"
        "request_timeout: 0.5\n"
        "simulated_delay: 0\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("REFLECT_CONFIG", str(config_path))

    assert ReflectManager.main(["dashboard"]) == 0

    out = capsys.readouterr().out
    assert "Offline Mode (Mock Data)" in out
    assert "Gold Sunburst Decor(3)" in out
    assert "ord-1002 Salma Bennani: 6,000.00 DH" in out
