"""
Tests for src.tools.add_dashboard_panels — async facade and registration.
"""

import asyncio

import pytest

from src.dashboard.dashboard_scene import set_scene_context
from src.dashboard.errors import AddPanelsError, DashboardContextError
from src.dashboard.schema import AddPanelsBatch
from src.tools import add_dashboard_panels as tool_module
from src.tools.add_dashboard_panels import (
    TOOL_DESCRIPTION,
    TOOL_NAME,
    add_dashboard_panels,
    add_dashboard_panels_tool,
    register_add_dashboard_panels_tool,
)
from src.tools.config import PanelDefaultsConfig, PanelToolsConfig, RegistrationConfig


def _batch(count: int = 1) -> dict:
    return {"panels": [
        {
            "pluginId": "stat",
            "title": f"Stat {i}",
            "targets": [{"expr": "up", "datasource": {"type": "prometheus", "uid": "ds1"}}],
        }
        for i in range(count)
    ]}


@pytest.fixture(autouse=True)
def reset_tool_config():
    yield
    tool_module.configure(PanelToolsConfig())


# ===================================================================
# Invocation
# ===================================================================

class TestInvoke:

    def test_resolves_with_messages(self, current_dashboard, datasource_srv):
        message = asyncio.run(add_dashboard_panels(_batch(2)))
        ids = current_dashboard.get_panel_ids()
        assert message == "\n".join(
            f'Added panel "Stat {i}" with ID {pid}' for i, pid in enumerate(ids)
        )

    def test_no_dashboard_rejects_with_context_error(self, datasource_srv):
        set_scene_context(None)
        with pytest.raises(DashboardContextError, match="No dashboard scene context found"):
            asyncio.run(add_dashboard_panels(_batch()))

    def test_non_dashboard_scene_is_no_context(self, datasource_srv):
        set_scene_context(object())
        try:
            with pytest.raises(DashboardContextError):
                asyncio.run(add_dashboard_panels(_batch()))
        finally:
            set_scene_context(None)

    def test_validation_failure_rejects(self, current_dashboard, datasource_srv):
        with pytest.raises(AddPanelsError, match="Failed to add panels") as exc_info:
            asyncio.run(add_dashboard_panels({"panels": []}))
        assert not isinstance(exc_info.value, DashboardContextError)
        assert current_dashboard.panels == []

    def test_config_default_title_applied(self, current_dashboard, datasource_srv):
        tool_module.configure(PanelToolsConfig(panels=PanelDefaultsConfig(default_title="Untitled")))
        message = asyncio.run(add_dashboard_panels({"panels": [{"pluginId": "text"}]}))
        assert message.startswith('Added panel "Untitled" with ID ')


# ===================================================================
# Tool definition
# ===================================================================

class TestDefinition:

    def test_stable_name_and_description(self):
        assert add_dashboard_panels_tool.name == TOOL_NAME == "add_dashboard_panels"
        assert add_dashboard_panels_tool.description == TOOL_DESCRIPTION == "Add panels to the dashboard"

    def test_schema_is_batch_contract(self):
        assert add_dashboard_panels_tool.schema is AddPanelsBatch
        params = add_dashboard_panels_tool.parameters()
        assert params["required"] == ["panels"]


# ===================================================================
# Registration
# ===================================================================

class TestRegistration:

    def test_registers_immediately_when_ready(self, tool_registry):
        tool_registry.mark_ready()
        assert register_add_dashboard_panels_tool(tool_registry, PanelToolsConfig()) is True
        entry = tool_registry.get_tool(TOOL_NAME)
        assert entry is not None
        assert entry.owner_id == "dashboard-panels"
        assert entry.metadata.category == "utilities"
        assert entry.metadata.tags == ("dashboard", "panels")

    def test_deferred_until_ready(self, tool_registry):
        assert register_add_dashboard_panels_tool(tool_registry, PanelToolsConfig()) is False
        assert tool_registry.get_tool(TOOL_NAME) is None
        tool_registry.mark_ready()
        assert tool_registry.get_tool(TOOL_NAME) is not None

    def test_uses_process_wide_registry(self, tool_registry):
        tool_registry.mark_ready()
        register_add_dashboard_panels_tool(config=PanelToolsConfig())
        assert tool_registry.get_tool(TOOL_NAME) is not None

    def test_registration_metadata_from_config(self, tool_registry):
        tool_registry.mark_ready()
        config = PanelToolsConfig(registration=RegistrationConfig(
            owner_id="grafana-assistant", category="dashboards", tags=["viz"], debug_registry=False,
        ))
        register_add_dashboard_panels_tool(tool_registry, config)
        entry = tool_registry.get_tool(TOOL_NAME)
        assert entry.owner_id == "grafana-assistant"
        assert entry.metadata.tags == ("viz",)

    def test_duplicate_registration_is_skipped(self, tool_registry):
        tool_registry.mark_ready()
        register_add_dashboard_panels_tool(tool_registry, PanelToolsConfig())
        register_add_dashboard_panels_tool(tool_registry, PanelToolsConfig())
        assert len(tool_registry.list_tools()) == 1

    def test_disabled_by_feature_flag(self, tool_registry, env_override):
        env_override(FEATURE_PANEL_TOOLS="false")
        tool_registry.mark_ready()
        assert register_add_dashboard_panels_tool(tool_registry, PanelToolsConfig()) is False
        assert tool_registry.list_tools() == []

    def test_invoke_through_registry(self, tool_registry, current_dashboard, datasource_srv):
        tool_registry.mark_ready()
        register_add_dashboard_panels_tool(tool_registry, PanelToolsConfig())
        message = asyncio.run(tool_registry.invoke(TOOL_NAME, _batch()))
        assert message.startswith('Added panel "Stat 0" with ID ')
        assert len(current_dashboard.panels) == 1
