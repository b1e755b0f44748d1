"""
Dashboard Mutator — adds a validated batch of panels to one dashboard.

Per call: validate → ensure edit mode → assemble every panel → attach in
input order → one forced render. Nothing raised below this layer escapes;
every failure comes back as an ``AddPanelsResult`` with ``success=False``.

There is no rollback. If the dashboard rejects a panel mid-batch, panels
attached before it stay attached and the failure message lists their ids.

Public API:
    AddPanelsResult, AddSinglePanelResult
    PanelIdAllocator(max_panel_id, rng)
    add_panels_to_dashboard(dashboard, raw)        → AddPanelsResult
    add_single_panel_to_dashboard(dashboard, raw)  → AddSinglePanelResult
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Set

from src.dashboard.assembler import DEFAULT_PANEL_TITLE, build_viz_panel, panel_display_title
from src.dashboard.dashboard_scene import DashboardScene
from src.dashboard.datasources import DataSourceSrv
from src.dashboard.errors import DashboardPanelsError, PanelAttachmentError
from src.dashboard.scene import VizPanel
from src.dashboard.schema import validate_add_panels

logger = logging.getLogger(__name__)

DEFAULT_MAX_PANEL_ID = 1_000_000
_MAX_DRAWS = 32


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class AddPanelsResult:
    success: bool
    panel_ids: List[int] = field(default_factory=list)
    message: str = ""


@dataclass
class AddSinglePanelResult:
    success: bool
    panel_id: Optional[int] = None
    message: str = ""


# ---------------------------------------------------------------------------
# Identifier allocation
# ---------------------------------------------------------------------------

class PanelIdAllocator:
    """Draws panel ids from ``[1, max_panel_id)`` without reusing taken ones.

    Taken ids are the dashboard's attached ids plus every id this allocator
    has already handed out. After a bounded number of colliding draws it
    falls back to one past the largest taken id.
    """

    def __init__(self, max_panel_id: int = DEFAULT_MAX_PANEL_ID, rng: Optional[random.Random] = None):
        if max_panel_id < 2:
            raise ValueError(f"max_panel_id must be at least 2, got {max_panel_id}")
        self._max_panel_id = max_panel_id
        self._rng = rng or random.Random()
        self._issued: Set[int] = set()

    def allocate(self, existing: Iterable[int] = ()) -> int:
        taken = set(existing) | self._issued
        for _ in range(_MAX_DRAWS):
            candidate = self._rng.randrange(1, self._max_panel_id)
            if candidate not in taken:
                break
        else:
            candidate = max(taken, default=0) + 1
            logger.warning("panel_id_fallback: id=%d, taken=%d", candidate, len(taken))
        self._issued.add(candidate)
        return candidate


# ---------------------------------------------------------------------------
# Mutation
# ---------------------------------------------------------------------------

def add_panels_to_dashboard(
    dashboard: DashboardScene,
    config: Any,
    *,
    resolver: Optional[DataSourceSrv] = None,
    id_allocator: Optional[PanelIdAllocator] = None,
    default_title: str = DEFAULT_PANEL_TITLE,
) -> AddPanelsResult:
    """Validate ``config`` and add its panels to ``dashboard``.

    Args:
        dashboard: Target dashboard.
        config: Raw batch mapping (``{"panels": [...]}``) or an AddPanelsBatch.
        resolver: Data-source resolver for the query pipelines.
        id_allocator: Source of panel ids; a fresh allocator when omitted.
        default_title: Title for panels that have none.

    Returns:
        AddPanelsResult. On success, one id and one message line per panel,
        in input order.
    """
    try:
        batch = validate_add_panels(config)

        if not dashboard.is_editing:
            dashboard.on_enter_edit_mode()

        allocator = id_allocator or PanelIdAllocator()
        existing = dashboard.get_panel_ids()

        panel_ids: List[int] = []
        panels: List[VizPanel] = []
        for panel_config in batch.panels:
            panel_id = allocator.allocate(existing)
            panels.append(build_viz_panel(panel_config, panel_id, resolver, default_title))
            panel_ids.append(panel_id)

        attached: List[int] = []
        for idx, panel in enumerate(panels):
            try:
                dashboard.add_panel(panel)
            except Exception as exc:
                raise PanelAttachmentError(idx, len(panels), exc, attached) from exc
            attached.append(panel_ids[idx])

        dashboard.force_render()

        results = [
            f'Added panel "{panel_display_title(cfg, default_title)}" with ID {pid}'
            for cfg, pid in zip(batch.panels, panel_ids)
        ]
        logger.info("panels_added: dashboard=%s, ids=%s", dashboard.uid, panel_ids)
        return AddPanelsResult(success=True, panel_ids=panel_ids, message="\n".join(results))

    except DashboardPanelsError as exc:
        logger.warning("panels_add_failed: dashboard=%s, error=%s", getattr(dashboard, "uid", None), exc)
        return AddPanelsResult(success=False, panel_ids=[], message=f"Failed to add panels: {exc}")
    except Exception as exc:
        logger.exception("panels_add_error: dashboard=%s", getattr(dashboard, "uid", None))
        detail = str(exc) or type(exc).__name__
        return AddPanelsResult(success=False, panel_ids=[], message=f"Failed to add panels: {detail}")


def add_single_panel_to_dashboard(
    dashboard: DashboardScene,
    config: Any,
    **kwargs: Any,
) -> AddSinglePanelResult:
    """Add one panel; thin wrapper over add_panels_to_dashboard."""
    result = add_panels_to_dashboard(dashboard, {"panels": [config]}, **kwargs)
    return AddSinglePanelResult(
        success=result.success,
        panel_id=result.panel_ids[0] if result.panel_ids else None,
        message=result.message,
    )
