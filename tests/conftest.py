"""
Panel Tools Test Configuration
Provides shared fixtures for the test suite.
"""
import os
import sys

import pytest

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.core import feature_flags
from src.dashboard.dashboard_scene import DashboardScene, set_scene_context
from src.dashboard.datasources import (
    DataSourceInstanceSettings,
    DataSourceSrv,
    set_data_source_srv,
)
from src.tools.registry import ToolRegistry, set_tool_registry


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def env_override(monkeypatch):
    """Factory fixture to set env vars scoped to a single test.

    Usage:
        def test_something(env_override):
            env_override(FEATURE_PANEL_TOOLS="false")
    """
    def _set(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key, value)
        feature_flags.reload_flags()
    yield _set
    monkeypatch.undo()
    feature_flags.reload_flags()


@pytest.fixture
def datasource_srv():
    """Resolver with a Prometheus and a Loki instance, installed process-wide."""
    srv = DataSourceSrv([
        DataSourceInstanceSettings(uid="ds1", name="Prometheus", type="prometheus", is_default=True),
        DataSourceInstanceSettings(uid="loki1", name="Loki", type="loki"),
    ])
    set_data_source_srv(srv)
    yield srv
    set_data_source_srv(None)


@pytest.fixture
def dashboard():
    return DashboardScene(title="Test dashboard", uid="test-dash")


@pytest.fixture
def current_dashboard(dashboard):
    """Publish the dashboard as the current scene for the duration of a test."""
    set_scene_context(dashboard)
    yield dashboard
    set_scene_context(None)


@pytest.fixture
def tool_registry():
    registry = ToolRegistry()
    set_tool_registry(registry)
    yield registry
    set_tool_registry(None)

