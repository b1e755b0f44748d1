"""
Panel Assembler — builds a fully wired VizPanel from a validated PanelConfig.

Every panel gets the links menu, notices and context menu. A data pipeline
(query runner wrapped in a transformer stage) is built only when the config
has targets, and a time-range override only when ``timeFrom`` or
``timeShift`` is set. Assembly attaches nothing and renders nothing.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from src.dashboard.datasources import DataSourceSrv, get_data_source_srv
from src.dashboard.schema import PanelConfig
from src.dashboard.scene import (
    DashboardDatasourceBehaviour,
    PanelNotices,
    PanelTimeRange,
    SceneDataTransformer,
    SceneQueryRunner,
    VizPanel,
    VizPanelLinks,
    VizPanelLinksMenu,
    VizPanelMenu,
    get_viz_panel_key_for_panel_id,
    panel_links_behavior,
    panel_menu_behavior,
    set_dashboard_panel_context,
)

logger = logging.getLogger(__name__)

DEFAULT_PANEL_TITLE = "New Panel"


def panel_display_title(config: PanelConfig, default_title: str = DEFAULT_PANEL_TITLE) -> str:
    return config.title or default_title


def _build_data_pipeline(config: PanelConfig, resolver: DataSourceSrv) -> SceneDataTransformer:
    targets = config.targets or []
    duplicates = [ref for ref, n in Counter(t.ref_id for t in targets).items() if n > 1]
    if duplicates:
        logger.warning("panel_duplicate_ref_ids: ref_ids=%s", duplicates)

    queries: List[Dict[str, Any]] = [
        {
            "refId": target.ref_id,
            "expr": target.expr,
            "legendFormat": target.legend_format,
            "hide": target.hide,
            "range": target.range,
            "datasource": target.datasource,
        }
        for target in targets
    ]

    # Panel-level source wins; otherwise the first target's.
    requested = config.datasource or targets[0].datasource
    ds_ref = resolver.resolve(requested)

    return SceneDataTransformer(
        data=SceneQueryRunner(
            queries=queries,
            datasource=ds_ref,
            behaviors=[DashboardDatasourceBehaviour()],
        ),
        transformations=[
            {"id": t.id, "options": dict(t.options or {})}
            for t in config.transformations or []
        ],
    )


def build_viz_panel(
    config: PanelConfig,
    panel_id: int,
    resolver: Optional[DataSourceSrv] = None,
    default_title: str = DEFAULT_PANEL_TITLE,
) -> VizPanel:
    """Create a VizPanel from a validated panel config.

    Args:
        config: Validated PanelConfig.
        panel_id: Identifier the panel key is derived from.
        resolver: Data-source resolver; the process-wide one when omitted.
        default_title: Title used when the config has none.

    Returns:
        The assembled, unattached VizPanel.

    Raises:
        DataSourceResolutionError if the effective data source is unknown.
    """
    title_items: List[Any] = [
        VizPanelLinks(menu=VizPanelLinksMenu(behaviors=[panel_links_behavior])),
        PanelNotices(),
    ]

    data = None
    if config.targets:
        data = _build_data_pipeline(config, resolver or get_data_source_srv())

    time_range = None
    if config.time_from or config.time_shift:
        time_range = PanelTimeRange(
            time_from=config.time_from,
            time_shift=config.time_shift,
            hide_time_override=config.hide_time_override,
        )

    if config.field_config is not None:
        field_config = config.field_config.model_dump()
    else:
        field_config = {"defaults": {}, "overrides": []}

    panel = VizPanel(
        key=get_viz_panel_key_for_panel_id(panel_id),
        title=panel_display_title(config, default_title),
        description=config.description,
        plugin_id=config.plugin_id,
        options=dict(config.options or {}),
        field_config=field_config,
        display_mode="transparent" if config.transparent else None,
        hover_header=not config.title,
        hover_header_offset=0,
        title_items=title_items,
        behaviors=[],
        extend_panel_context=set_dashboard_panel_context,
        menu=VizPanelMenu(behaviors=[panel_menu_behavior]),
        data=data,
        time_range=time_range,
        grid_pos=config.grid_pos,
        max_per_row=config.max_per_row,
    )
    logger.debug(
        "panel_assembled: key=%s, plugin=%s, queries=%d, time_override=%s",
        panel.key, panel.plugin_id,
        len(data.query_runner.queries) if data else 0,
        time_range is not None,
    )
    return panel
