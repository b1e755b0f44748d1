"""
Dashboard Panels
================

Turns declarative panel configurations into wired panels on a live
dashboard.

Core modules:
- schema: validated panel / batch configuration
- scene: panel-side objects (panel, query runner, menus, time override)
- datasources: data-source reference resolution
- dashboard_scene: the dashboard and the current-scene slot
- assembler: config → VizPanel
- mutator: batch add with edit-mode entry and a single render
"""

from src.dashboard.errors import (
    AddPanelsError,
    DashboardContextError,
    DashboardPanelsError,
    DataSourceResolutionError,
    PanelAttachmentError,
    PanelConfigValidationError,
    ValidationIssue,
)

from src.dashboard.schema import (
    AddPanelsBatch,
    PanelConfig,
    validate_add_panels,
    validate_panel_config,
)

from src.dashboard.dashboard_scene import (
    DashboardScene,
    get_current_dashboard_scene,
    set_scene_context,
)

from src.dashboard.mutator import (
    AddPanelsResult,
    PanelIdAllocator,
    add_panels_to_dashboard,
    add_single_panel_to_dashboard,
)

__all__ = [
    # Errors
    "AddPanelsError",
    "DashboardContextError",
    "DashboardPanelsError",
    "DataSourceResolutionError",
    "PanelAttachmentError",
    "PanelConfigValidationError",
    "ValidationIssue",
    # Schema
    "AddPanelsBatch",
    "PanelConfig",
    "validate_add_panels",
    "validate_panel_config",
    # Dashboard
    "DashboardScene",
    "get_current_dashboard_scene",
    "set_scene_context",
    # Mutation
    "AddPanelsResult",
    "PanelIdAllocator",
    "add_panels_to_dashboard",
    "add_single_panel_to_dashboard",
]
