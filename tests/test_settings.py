import pytest

from config import get_settings_module, load_settings
from config.config import position_policies


@pytest.mark.parametrize(
    "env, module",
    [("production", "config.production"), ("prod", "config.production"), ("testing", "config.testing"), ("dev", "config.development")],
)
def test_settings_module_follows_app_env(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == module


def test_position_policies_from_json(monkeypatch):
    monkeypatch.delenv("POSITION_POLICIES", raising=False)
    assert position_policies()["Nhân viên Mascot"] == "fixed_shift"

    monkeypatch.setenv("POSITION_POLICIES", '{"Nhân viên Tiếp đón": "single_pair"}')
    assert position_policies() == {"Nhân viên Tiếp đón": "single_pair"}


def test_load_settings_imports_the_testing_module(monkeypatch):
    monkeypatch.setenv("APP_ENV", "test")

    settings = load_settings()

    assert settings.TESTING is True
    assert settings.DB_CONFIG["database"] == "staffing_hours_test"
