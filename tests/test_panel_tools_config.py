"""Tests for panel tools config loader and feature flags."""

import os

import pytest

from src.core import feature_flags
from src.tools.config import (
    PanelDefaultsConfig,
    PanelToolsConfig,
    RegistrationConfig,
    load_panel_tools_config,
)


# Path to the real config file
CONFIG_PATH = os.path.join(os.path.dirname(__file__), "..", "config", "panel_tools.yaml")


def test_load_real_config():
    """load_panel_tools_config() loads the real config/panel_tools.yaml successfully."""
    config = load_panel_tools_config(CONFIG_PATH)
    assert isinstance(config, PanelToolsConfig)
    assert config.version == "1.0"
    assert config.registration.tags == ["dashboard", "panels"]


def test_real_config_datasources():
    config = load_panel_tools_config(CONFIG_PATH)
    srv = config.build_data_source_srv()
    assert srv.get_instance_settings("prometheus").type == "prometheus"
    assert srv.get_instance_settings("Loki").uid == "loki"
    assert srv.get_instance_settings(None).uid == "prometheus"


def test_missing_file_returns_defaults(tmp_path):
    config = load_panel_tools_config(str(tmp_path / "nope.yaml"))
    assert config == PanelToolsConfig()
    assert config.panels.max_panel_id == 1_000_000
    assert config.panels.default_title == "New Panel"


def test_empty_file_returns_defaults(tmp_path):
    path = tmp_path / "panel_tools.yaml"
    path.write_text("", encoding="utf-8")
    assert load_panel_tools_config(str(path)) == PanelToolsConfig()


def test_invalid_file_returns_defaults(tmp_path):
    path = tmp_path / "panel_tools.yaml"
    path.write_text("panels:\n  max_panel_id: 5\n", encoding="utf-8")
    assert load_panel_tools_config(str(path)).panels.max_panel_id == 1_000_000


def test_partial_file_merges_defaults(tmp_path):
    path = tmp_path / "panel_tools.yaml"
    path.write_text("registration:\n  owner_id: ops-assistant\n", encoding="utf-8")
    config = load_panel_tools_config(str(path))
    assert config.registration.owner_id == "ops-assistant"
    assert config.registration.category == "utilities"


def test_env_path_used(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("panels:\n  default_title: Draft\n", encoding="utf-8")
    monkeypatch.setenv("PANEL_TOOLS_CONFIG", str(path))
    assert load_panel_tools_config().panels.default_title == "Draft"


def test_registration_rejects_empty_owner():
    with pytest.raises(Exception):
        RegistrationConfig(owner_id="  ")


def test_panel_defaults_reject_small_id_space():
    with pytest.raises(Exception):
        PanelDefaultsConfig(max_panel_id=10)


# ---------------------------------------------------------------------------
# Feature flags
# ---------------------------------------------------------------------------

def test_flags_default_true(monkeypatch):
    monkeypatch.delenv("FEATURE_PANEL_TOOLS", raising=False)
    monkeypatch.delenv("FEATURE_TOOLS_API", raising=False)
    feature_flags.reload_flags()
    assert feature_flags.FEATURE_PANEL_TOOLS is True
    assert feature_flags.FEATURE_TOOLS_API is True


@pytest.mark.parametrize("value,expected", [
    ("true", True), ("1", True), ("yes", True), ("false", False), ("0", False), ("off", False),
])
def test_flag_parsing(env_override, value, expected):
    env_override(FEATURE_PANEL_TOOLS=value)
    assert feature_flags.FEATURE_PANEL_TOOLS is expected


def test_set_flag(monkeypatch):
    monkeypatch.setenv("FEATURE_TOOLS_API", "true")
    feature_flags.set_flag("FEATURE_TOOLS_API", False)
    try:
        assert feature_flags.FEATURE_TOOLS_API is False
        assert os.environ["FEATURE_TOOLS_API"] == "false"
    finally:
        monkeypatch.setenv("FEATURE_TOOLS_API", "true")
        feature_flags.reload_flags()


def test_set_unknown_flag():
    with pytest.raises(ValueError, match="Unknown flag"):
        feature_flags.set_flag("FEATURE_NOPE", True)
