"""
Built-in tool: add_dashboard_panels — add up to five panels to the current dashboard.

Wraps the dashboard mutator behind an async, single-outcome call: resolves
with one "Added panel ..." line per panel, or raises. Registration waits
for the tool registry's readiness signal.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from src.core import feature_flags
from src.dashboard.dashboard_scene import get_current_dashboard_scene
from src.dashboard.datasources import set_data_source_srv
from src.dashboard.errors import AddPanelsError, DashboardContextError
from src.dashboard.mutator import PanelIdAllocator, add_panels_to_dashboard
from src.dashboard.schema import AddPanelsBatch
from src.tools.config import PanelToolsConfig, load_panel_tools_config
from src.tools.registry import (
    ToolMetadata,
    ToolRegistry,
    ToolRegistryError,
    create_tool,
    get_tool_registry,
)

logger = logging.getLogger(__name__)

TOOL_NAME = "add_dashboard_panels"
TOOL_DESCRIPTION = "Add panels to the dashboard"

_config: PanelToolsConfig = PanelToolsConfig()


def configure(config: PanelToolsConfig) -> None:
    """Apply panel tools config: panel defaults and configured data sources."""
    global _config
    _config = config
    if config.datasources:
        set_data_source_srv(config.build_data_source_srv())


async def add_dashboard_panels(config: Mapping[str, Any]) -> str:
    """Add the panels described by ``config`` to the current dashboard.

    Returns:
        Newline-joined "Added panel ..." messages, one per panel.

    Raises:
        DashboardContextError: No dashboard scene is loaded
        AddPanelsError: Validation, resolution or attachment failed
    """
    dashboard = get_current_dashboard_scene()
    if dashboard is None:
        raise DashboardContextError()

    result = add_panels_to_dashboard(
        dashboard,
        config,
        id_allocator=PanelIdAllocator(_config.panels.max_panel_id),
        default_title=_config.panels.default_title,
    )
    if not result.success:
        raise AddPanelsError(result.message)
    return result.message


add_dashboard_panels_tool = create_tool(
    name=TOOL_NAME,
    description=TOOL_DESCRIPTION,
    schema=AddPanelsBatch,
    func=add_dashboard_panels,
)


def register_add_dashboard_panels_tool(
    registry: Optional[ToolRegistry] = None,
    config: Optional[PanelToolsConfig] = None,
) -> bool:
    """Register the tool now if the registry is ready, otherwise once it is.

    Returns:
        True if registered immediately, False if deferred or disabled.
    """
    if not feature_flags.FEATURE_PANEL_TOOLS:
        logger.info("Panel tools disabled by feature flag")
        return False

    registry = registry or get_tool_registry()
    config = config or load_panel_tools_config()
    configure(config)
    reg = config.registration

    def _register(ready_registry: ToolRegistry) -> None:
        try:
            ready_registry.register_tool(
                add_dashboard_panels_tool,
                reg.owner_id,
                ToolMetadata(category=reg.category, tags=tuple(reg.tags)),
            )
        except ToolRegistryError as exc:
            logger.warning("add_dashboard_panels registration skipped: %s", exc)
            return
        if reg.debug_registry:
            ready_registry.debug_tool_registry()

    immediate = registry.when_ready(_register)
    if not immediate:
        logger.info("add_dashboard_panels registration deferred until registry is ready")
    return immediate
