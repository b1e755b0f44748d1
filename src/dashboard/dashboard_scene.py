"""
Dashboard Scene — the live dashboard that assembled panels are attached to.

Owns the ordered grid layout, the edit-mode flag and a render counter.
Also holds the ambient "current scene" slot that tool invocations use to
find the dashboard the caller is looking at.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, List, Optional

from src.dashboard.scene import VizPanel
from src.dashboard.schema import GridPos

logger = logging.getLogger(__name__)

DEFAULT_PANEL_WIDTH = 12
DEFAULT_PANEL_HEIGHT = 8


@dataclass
class DashboardGridItem:
    """A panel placed on the layout grid."""
    panel: VizPanel
    x: int
    y: int
    width: int
    height: int
    max_per_row: Optional[int] = None


class DashboardScene:
    """A dashboard holding grid-placed panels."""

    def __init__(self, title: str = "New dashboard", uid: Optional[str] = None, is_editing: bool = False):
        self.title = title
        self.uid = uid or uuid.uuid4().hex[:14]
        self.is_editing = is_editing
        self.render_count = 0
        self._items: List[DashboardGridItem] = []

    # -- edit mode ----------------------------------------------------------

    def on_enter_edit_mode(self) -> None:
        if self.is_editing:
            return
        self.is_editing = True
        logger.info("dashboard_edit_mode_entered: uid=%s", self.uid)

    def on_exit_edit_mode(self) -> None:
        self.is_editing = False

    # -- layout -------------------------------------------------------------

    @property
    def grid_items(self) -> List[DashboardGridItem]:
        return list(self._items)

    @property
    def panels(self) -> List[VizPanel]:
        return [item.panel for item in self._items]

    def get_panel_ids(self) -> List[int]:
        return [item.panel.panel_id for item in self._items if item.panel.panel_id is not None]

    def get_panel(self, panel_id: int) -> Optional[VizPanel]:
        for item in self._items:
            if item.panel.panel_id == panel_id:
                return item.panel
        return None

    def add_panel(self, panel: VizPanel) -> DashboardGridItem:
        """Place a panel on the grid.

        Panels with an explicit grid position keep it. Others go to the top
        of the dashboard at the default size and push existing panels down.

        Raises:
            ValueError if a panel with the same key is already attached.
        """
        if any(item.panel.key == panel.key for item in self._items):
            raise ValueError(f"Panel key '{panel.key}' already exists on dashboard {self.uid}")

        if panel.grid_pos is not None:
            # Explicit positions are taken as given; existing panels are not moved.
            pos: GridPos = panel.grid_pos
            item = DashboardGridItem(
                panel=panel, x=pos.x, y=pos.y,
                width=pos.w, height=pos.h,
                max_per_row=panel.max_per_row,
            )
        else:
            for existing in self._items:
                existing.y += DEFAULT_PANEL_HEIGHT
            item = DashboardGridItem(
                panel=panel, x=0, y=0,
                width=DEFAULT_PANEL_WIDTH, height=DEFAULT_PANEL_HEIGHT,
                max_per_row=panel.max_per_row,
            )
        self._items.append(item)
        logger.debug("dashboard_panel_added: uid=%s, key=%s", self.uid, panel.key)
        return item

    def remove_panel(self, panel_id: int) -> bool:
        for idx, item in enumerate(self._items):
            if item.panel.panel_id == panel_id:
                del self._items[idx]
                return True
        return False

    def force_render(self) -> None:
        self.render_count += 1
        logger.debug("dashboard_render: uid=%s, count=%d", self.uid, self.render_count)


# ---------------------------------------------------------------------------
# Scene context slot
# ---------------------------------------------------------------------------

_scene_context: Any = None


def set_scene_context(scene: Any) -> None:
    """Publish the scene the caller is currently looking at (None to clear)."""
    global _scene_context
    _scene_context = scene


def get_current_dashboard_scene() -> Optional[DashboardScene]:
    """Return the current scene if it is a dashboard, else None."""
    if isinstance(_scene_context, DashboardScene):
        return _scene_context
    return None
