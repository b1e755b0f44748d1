"""
Panel Config Schema — validated description of dashboard panels.

Defines the pydantic models describing one panel (queries, field styling,
layout, transformations, time overrides) and a batch of up to five panels,
plus the validator used at the tool boundary.

Wire names are camelCase (``refId``, ``pluginId``, ``gridPos`` ...) through
field aliases; either the alias or the attribute name is accepted on input.
Unknown keys are ignored so callers built against newer panel payloads keep
working. ``options`` and ``fieldConfig`` internals are owned by the
rendering side and pass through untouched.

Public API:
    DataSourceRef, QueryTarget, FieldConfig, GridPos, Transformation
    PanelConfig, AddPanelsBatch
    validate_add_panels(raw)   → AddPanelsBatch
    validate_panel_config(raw) → PanelConfig
    add_panels_json_schema()   → dict
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from src.dashboard.errors import PanelConfigValidationError, ValidationIssue

logger = logging.getLogger(__name__)

MAX_PANELS_PER_BATCH = 5
MAX_TARGETS_PER_PANEL = 5
GRID_COLUMN_COUNT = 24


class _SchemaModel(BaseModel):
    """Strict base: scalars are never coerced, optional fields may be omitted but not null."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        # Defaults are not validated, so this only fires on an explicit null.
        if value is None:
            raise ValueError("null is not allowed, omit the field instead")
        return value


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------

class DataSourceRef(_SchemaModel):
    """Reference to a configured query backend instance."""
    type: StrictStr = Field(description='The type of datasource (e.g., "prometheus", "loki", "mysql")')
    uid: StrictStr = Field(description="The unique identifier of the datasource instance")


class QueryTarget(_SchemaModel):
    """One data query bound to a panel."""
    ref_id: StrictStr = Field(
        "A", alias="refId",
        description='The reference ID for the query, typically "A", "B", etc.',
    )
    datasource: DataSourceRef = Field(description="The datasource configuration")
    hide: StrictBool = Field(False, description="Whether to hide this query")
    expr: StrictStr = Field(description="The query expression to use")
    range: StrictBool = Field(True, description="Whether this is a range query")
    legend_format: Optional[StrictStr] = Field(
        None, alias="legendFormat",
        description='The format for the legend, e.g. "{{state}}"',
    )


class FieldConfig(_SchemaModel):
    defaults: Dict[str, Any] = Field(description="Default field configuration applied to all fields")
    overrides: List[Any] = Field(description="Field-specific configuration overrides")


class GridPos(_SchemaModel):
    """Placement on the 24-column dashboard grid. Out-of-range values fail, never clamp."""
    h: StrictInt = Field(8, ge=1, le=24, description="Panel height in grid units (1-24)")
    w: StrictInt = Field(12, ge=1, le=24, description="Panel width in grid units (1-24)")
    x: StrictInt = Field(0, ge=0, le=23, description="Panel horizontal position (0-23)")
    y: StrictInt = Field(0, ge=0, description="Panel vertical position (0+)")

    @model_validator(mode="after")
    def _fits_grid(self) -> "GridPos":
        if self.x + self.w > GRID_COLUMN_COUNT:
            raise ValueError(
                f"panel overflows the {GRID_COLUMN_COUNT}-column grid (x + w = {self.x + self.w})"
            )
        return self


class Transformation(_SchemaModel):
    id: StrictStr = Field(description="The transformation type identifier")
    options: Optional[Dict[str, Any]] = Field(
        None, description="Transformation-specific configuration options",
    )


# ---------------------------------------------------------------------------
# Panel + batch
# ---------------------------------------------------------------------------

class PanelConfig(_SchemaModel):
    """Validated description of a single panel."""
    title: Optional[StrictStr] = Field(None, description="The panel title displayed at the top")
    description: Optional[StrictStr] = Field(None, description="Detailed panel description for documentation")
    plugin_id: StrictStr = Field(
        alias="pluginId",
        description='Panel plugin identifier (e.g., "timeseries", "gauge", "stat", "barchart")',
    )
    datasource: Optional[DataSourceRef] = Field(
        None,
        description=(
            "The datasource configuration for the panel. "
            "If not provided, will use the first target's datasource."
        ),
    )
    options: Optional[Dict[str, Any]] = Field(
        None, description="Panel-specific visualization options and settings",
    )
    field_config: Optional[FieldConfig] = Field(
        None, alias="fieldConfig",
        description="Field configuration for styling and behavior",
    )
    targets: Optional[
        Annotated[List[QueryTarget], Field(min_length=1, max_length=MAX_TARGETS_PER_PANEL)]
    ] = Field(
        None,
        description=(
            "Query targets for the panel. At least one target is required for panels "
            "with data queries. Multiple targets are rare but useful for combining "
            "different metrics."
        ),
    )
    grid_pos: Optional[GridPos] = Field(
        None, alias="gridPos",
        description="Panel positioning and sizing on the dashboard grid",
    )
    transformations: Optional[List[Transformation]] = Field(
        None, description="Data transformations to apply to query results",
    )
    time_from: Optional[StrictStr] = Field(
        None, alias="timeFrom",
        description='Time range override - relative time (e.g., "1h", "24h")',
    )
    time_shift: Optional[StrictStr] = Field(
        None, alias="timeShift",
        description='Time shift override - shift time back (e.g., "1h", "1d")',
    )
    hide_time_override: Optional[StrictBool] = Field(
        None, alias="hideTimeOverride",
        description="Whether to hide the time override indicator",
    )
    transparent: Optional[StrictBool] = Field(
        None, description="Whether the panel background should be transparent",
    )
    max_per_row: Optional[StrictInt] = Field(
        None, alias="maxPerRow",
        description="Maximum number of repeated panels per row (for repeated panels)",
    )


class AddPanelsBatch(_SchemaModel):
    """A batch of one to five panel configurations."""
    panels: List[PanelConfig] = Field(
        min_length=1,
        max_length=MAX_PANELS_PER_BATCH,
        description=(
            "Panel configurations to add to the dashboard. Maximum 5 panels at once. "
            "Adding multiple panels at once is more efficient than adding one by one."
        ),
    )


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------

def _issues_from(exc: ValidationError) -> List[ValidationIssue]:
    return [
        ValidationIssue(
            path=".".join(str(part) for part in err.get("loc", ())),
            message=err.get("msg", "invalid value"),
        )
        for err in exc.errors()
    ]


def validate_add_panels(raw: Any) -> AddPanelsBatch:
    """Validate untyped input as an AddPanelsBatch, applying defaults.

    Args:
        raw: Mapping as received from the caller, or an AddPanelsBatch.

    Returns:
        Validated AddPanelsBatch.

    Raises:
        PanelConfigValidationError listing every violated path.
    """
    if isinstance(raw, AddPanelsBatch):
        return raw
    try:
        return AddPanelsBatch.model_validate(raw)
    except ValidationError as exc:
        issues = _issues_from(exc)
        logger.info("panel_config_rejected: issues=%d", len(issues))
        raise PanelConfigValidationError(issues) from exc


def validate_panel_config(raw: Any) -> PanelConfig:
    """Validate a single panel configuration."""
    if isinstance(raw, PanelConfig):
        return raw
    try:
        return PanelConfig.model_validate(raw)
    except ValidationError as exc:
        raise PanelConfigValidationError(_issues_from(exc)) from exc


def add_panels_json_schema() -> Dict[str, Any]:
    """JSON Schema of the batch contract, using wire (alias) names."""
    return AddPanelsBatch.model_json_schema(by_alias=True)
