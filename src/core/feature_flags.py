"""
Feature Flags — kill switches for the agent tool surface.

Each flag controls whether a subsystem is active. When disabled, the
system boots without it.

Environment variables:
    FEATURE_PANEL_TOOLS — default: true  (register dashboard panel tools)
    FEATURE_TOOLS_API   — default: true  (mount /api/tools router)
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def _env_bool(key: str, default: bool = True) -> bool:
    """Read a boolean from env; true / 1 / yes are truthy."""
    val = os.environ.get(key, "").strip().lower()
    if not val:
        return default
    return val in ("true", "1", "yes")


FEATURE_PANEL_TOOLS: bool = _env_bool("FEATURE_PANEL_TOOLS")
FEATURE_TOOLS_API: bool = _env_bool("FEATURE_TOOLS_API")


def set_flag(name: str, value: bool) -> None:
    """Set a feature flag at runtime. Raises ValueError for unknown flags."""
    import src.core.feature_flags as _self
    if not name.startswith("FEATURE_") or not hasattr(_self, name):
        raise ValueError(f"Unknown flag: {name}")
    if not isinstance(getattr(_self, name), bool):
        raise ValueError(f"{name} is not a boolean flag")
    setattr(_self, name, value)
    os.environ[name] = "true" if value else "false"
    logger.info("Flag set: %s = %s", name, value)


def reload_flags() -> None:
    """Re-read feature flags from environment. Used in tests."""
    global FEATURE_PANEL_TOOLS, FEATURE_TOOLS_API
    FEATURE_PANEL_TOOLS = _env_bool("FEATURE_PANEL_TOOLS")
    FEATURE_TOOLS_API = _env_bool("FEATURE_TOOLS_API")


def log_feature_flags() -> None:
    """Log the current flag values. Called when the tools API initialises."""
    logger.info(
        "Feature flags: PANEL_TOOLS=%s, TOOLS_API=%s",
        FEATURE_PANEL_TOOLS, FEATURE_TOOLS_API,
    )
