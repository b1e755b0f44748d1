"""
Dashboard Panel Errors — exception taxonomy for the panel tool pipeline.

    DashboardPanelsError          — base class
    PanelConfigValidationError    — malformed / out-of-range panel config
    DataSourceResolutionError     — data-source reference cannot be resolved
    DashboardContextError         — no dashboard scene available
    PanelAttachmentError          — fault while attaching an assembled panel
    AddPanelsError                — failed add surfaced by the tool facade
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence


class DashboardPanelsError(Exception):
    """Base class for all panel tool errors."""


@dataclass(frozen=True)
class ValidationIssue:
    """A single violated constraint, addressed by a dotted path."""
    path: str
    message: str

    def __str__(self) -> str:
        if not self.path:
            return self.message
        return f"{self.path}: {self.message}"


class PanelConfigValidationError(DashboardPanelsError):
    """Raised when a panel batch fails schema validation."""

    def __init__(self, issues: Sequence[ValidationIssue]):
        self.issues: List[ValidationIssue] = list(issues)
        summary = "; ".join(str(issue) for issue in self.issues) or "invalid panel configuration"
        super().__init__(f"Invalid panel configuration: {summary}")


class DataSourceResolutionError(DashboardPanelsError):
    """Raised when a data-source reference does not match a configured instance."""

    def __init__(self, uid: str, ds_type: Optional[str] = None):
        self.uid = uid
        self.ds_type = ds_type
        label = f"{ds_type}/{uid}" if ds_type else uid
        super().__init__(f"Data source not found: {label}")


class DashboardContextError(DashboardPanelsError):
    """Raised when no dashboard scene can be located."""

    def __init__(self, message: str = (
        "No dashboard scene context found. "
        "This usually means the dashboard is not loaded."
    )):
        super().__init__(message)


class PanelAttachmentError(DashboardPanelsError):
    """Raised when the dashboard rejects a panel mid-batch.

    Panels attached before the failure stay attached; their ids are kept
    on ``attached_ids`` so the caller can report the partial state.
    """

    def __init__(self, index: int, total: int, cause: BaseException, attached_ids: Sequence[int] = ()):
        self.index = index
        self.total = total
        self.cause = cause
        self.attached_ids: List[int] = list(attached_ids)
        detail = f"panel {index + 1} of {total} could not be attached: {cause}"
        if self.attached_ids:
            detail += " (already attached: " + ", ".join(str(i) for i in self.attached_ids) + ")"
        super().__init__(detail)


class AddPanelsError(DashboardPanelsError):
    """Raised by the tool facade when the mutator reports a failure."""
