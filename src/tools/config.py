"""
Panel Tools Configuration Loader

Loads and validates panel_tools.yaml using Pydantic v2.
Provides sensible defaults when the config file is missing.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from src.dashboard.datasources import DataSourceInstanceSettings, DataSourceSrv

logger = logging.getLogger(__name__)


# ── Config Models ────────────────────────────────────────────────

class RegistrationConfig(BaseModel):
    """How the panel tool is advertised to the tool registry."""
    owner_id: str = "dashboard-panels"
    category: str = "utilities"
    tags: List[str] = Field(default_factory=lambda: ["dashboard", "panels"])
    debug_registry: bool = True

    @field_validator("owner_id")
    @classmethod
    def validate_owner_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("owner_id must not be empty")
        return v


class PanelDefaultsConfig(BaseModel):
    """Panel construction defaults."""
    max_panel_id: int = 1_000_000
    default_title: str = "New Panel"

    @field_validator("max_panel_id")
    @classmethod
    def validate_max_panel_id(cls, v: int) -> int:
        if v < 1000:
            raise ValueError(f"max_panel_id must be >= 1000, got {v}")
        return v


class PanelToolsConfig(BaseModel):
    """Top-level panel tools configuration."""
    version: str = "1.0"
    registration: RegistrationConfig = RegistrationConfig()
    panels: PanelDefaultsConfig = PanelDefaultsConfig()
    datasources: List[DataSourceInstanceSettings] = []

    def build_data_source_srv(self) -> DataSourceSrv:
        return DataSourceSrv(self.datasources)


# ── Loader ───────────────────────────────────────────────────────

def load_panel_tools_config(config_path: Optional[str] = None) -> PanelToolsConfig:
    """Load panel tools config from YAML.

    Args:
        config_path: Path to panel_tools.yaml. If None, searches standard locations.

    Returns:
        Parsed PanelToolsConfig. Returns defaults if file is missing or invalid.
    """
    if config_path is None:
        candidates = [
            os.environ.get("PANEL_TOOLS_CONFIG", ""),
            "config/panel_tools.yaml",
            os.path.join(os.path.dirname(__file__), "../../config/panel_tools.yaml"),
        ]
        for candidate in candidates:
            if candidate and os.path.exists(candidate):
                config_path = candidate
                break

    if config_path is None or not os.path.exists(config_path):
        logger.warning("Panel tools config not found, using defaults")
        return PanelToolsConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)

        if raw is None:
            logger.warning("Panel tools config is empty, using defaults")
            return PanelToolsConfig()

        return PanelToolsConfig.model_validate(raw)
    except Exception as e:
        logger.error("Failed to load panel tools config: %s", e)
        return PanelToolsConfig()
