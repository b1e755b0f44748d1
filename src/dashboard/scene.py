"""
Scene Objects — panel-side building blocks consumed by the dashboard layout.

Minimal concrete versions of the objects the rendering engine expects a
panel to be wired from: the panel itself, its query runner and transformer
stage, time-range override, header items (links menu, notices) and the
context menu. These carry state only; rendering is not done here.

Menu behaviors are plain callables run when a menu is activated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from src.dashboard.schema import DataSourceRef, GridPos

_PANEL_KEY_PREFIX = "panel-"
_PANEL_KEY_RE = re.compile(r"^panel-(\d+)$")


def get_viz_panel_key_for_panel_id(panel_id: int) -> str:
    return f"{_PANEL_KEY_PREFIX}{panel_id}"


def get_panel_id_from_key(key: str) -> Optional[int]:
    """Inverse of get_viz_panel_key_for_panel_id. None for foreign keys."""
    match = _PANEL_KEY_RE.match(key or "")
    if match is None:
        return None
    return int(match.group(1))


# ---------------------------------------------------------------------------
# Menus and header items
# ---------------------------------------------------------------------------

MenuBehavior = Callable[["MenuItemsHolder"], None]


@dataclass
class MenuItem:
    text: str
    href: Optional[str] = None
    shortcut: Optional[str] = None


@dataclass
class MenuItemsHolder:
    """Common state for activatable menus."""
    behaviors: List[MenuBehavior] = field(default_factory=list)
    items: List[MenuItem] = field(default_factory=list)
    activated: bool = False

    def activate(self) -> None:
        """Run every behavior once; items are rebuilt on each activation."""
        self.items = []
        for behavior in self.behaviors:
            behavior(self)
        self.activated = True


@dataclass
class VizPanelMenu(MenuItemsHolder):
    """Context menu shown from the panel header."""


@dataclass
class VizPanelLinksMenu(MenuItemsHolder):
    """Drop-down listing the panel's data links."""
    owner: Optional["VizPanelLinks"] = field(default=None, repr=False, compare=False)


@dataclass
class VizPanelLinks:
    menu: VizPanelLinksMenu
    links: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.menu.owner = self


@dataclass
class PanelNotices:
    """Header slot for query warnings and errors reported by the data layer."""
    notices: List[Dict[str, Any]] = field(default_factory=list)


def panel_menu_behavior(menu: MenuItemsHolder) -> None:
    menu.items.extend([
        MenuItem(text="View", shortcut="v"),
        MenuItem(text="Edit", shortcut="e"),
        MenuItem(text="Share", shortcut="p s"),
        MenuItem(text="Explore", shortcut="p x"),
        MenuItem(text="Inspect", shortcut="i"),
        MenuItem(text="More..."),
    ])


def panel_links_behavior(menu: MenuItemsHolder) -> None:
    """Populate the links menu from the owning VizPanelLinks, if attached."""
    owner = getattr(menu, "owner", None)
    if owner is None:
        return
    for link in owner.links:
        menu.items.append(MenuItem(text=link.get("title", ""), href=link.get("url")))


# ---------------------------------------------------------------------------
# Data pipeline
# ---------------------------------------------------------------------------

@dataclass
class DashboardDatasourceBehaviour:
    """Marks a query runner as re-runnable when dashboard-level sources change."""
    state: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SceneQueryRunner:
    queries: List[Dict[str, Any]]
    datasource: DataSourceRef
    behaviors: List[Any] = field(default_factory=list)


@dataclass
class SceneDataTransformer:
    """Transformer stage wrapping a query runner; transformations apply in list order."""
    data: SceneQueryRunner
    transformations: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def query_runner(self) -> SceneQueryRunner:
        return self.data


@dataclass
class PanelTimeRange:
    time_from: Optional[str] = None
    time_shift: Optional[str] = None
    hide_time_override: Optional[bool] = None


# ---------------------------------------------------------------------------
# Panel
# ---------------------------------------------------------------------------

def set_dashboard_panel_context(panel: "VizPanel", context: Dict[str, Any]) -> Dict[str, Any]:
    """Extend the panel context with dashboard-scoped handlers."""
    context["dashboard_panel_key"] = panel.key
    context.setdefault("event_handlers", {})
    return context


@dataclass
class VizPanel:
    key: str
    title: str
    plugin_id: str
    description: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    field_config: Dict[str, Any] = field(default_factory=lambda: {"defaults": {}, "overrides": []})
    display_mode: Optional[str] = None
    hover_header: bool = False
    hover_header_offset: int = 0
    title_items: List[Any] = field(default_factory=list)
    behaviors: List[Any] = field(default_factory=list)
    extend_panel_context: Optional[Callable[["VizPanel", Dict[str, Any]], Dict[str, Any]]] = None
    menu: Optional[VizPanelMenu] = None
    data: Optional[SceneDataTransformer] = None
    time_range: Optional[PanelTimeRange] = None
    grid_pos: Optional[GridPos] = None
    max_per_row: Optional[int] = None

    @property
    def panel_id(self) -> Optional[int]:
        return get_panel_id_from_key(self.key)

    def build_context(self) -> Dict[str, Any]:
        context: Dict[str, Any] = {"panel_key": self.key}
        if self.extend_panel_context is not None:
            context = self.extend_panel_context(self, context)
        return context
