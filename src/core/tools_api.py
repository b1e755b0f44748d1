"""
Tools API — /api/tools/*

Exposes the agent tool registry: what is registered, provider-format
declarations for agent runtimes, and invocation of a tool by name.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from src.dashboard.errors import DashboardContextError, DashboardPanelsError
from src.tools.declarations import convert_declarations
from src.tools.registry import ToolNotFoundError, ToolRegistry, get_tool_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tools", tags=["tools"])

_registry: Optional[ToolRegistry] = None


def init_tools_api(registry: Optional[ToolRegistry] = None) -> None:
    """Initialise the tools API with a registry (the process-wide one by default)."""
    global _registry
    from src.core import feature_flags
    feature_flags.log_feature_flags()
    if not feature_flags.FEATURE_TOOLS_API:
        logger.info("Tools API: disabled by feature flag")
        _registry = None
        return
    _registry = registry or get_tool_registry()
    logger.info("Tools API initialised")


def _safe_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("")
async def list_tools():
    """Registered tools with owner and discovery metadata."""
    if _registry is None:
        return {"tools": [], "ready": False, "enabled": False}
    return {
        "tools": [entry.to_dict() for entry in _registry.list_tools()],
        "ready": _registry.is_ready,
        "enabled": True,
    }


@router.get("/declarations")
async def tool_declarations(format: str = "openai"):
    """Tool declarations in an agent provider's native format."""
    if _registry is None:
        return _safe_error(503, "Tool registry not initialised")
    try:
        return {"format": format, "tools": convert_declarations(_registry.declarations(), format)}
    except ValueError as exc:
        return _safe_error(400, str(exc))


@router.post("/{name}/invoke")
async def invoke_tool(name: str, arguments: Dict[str, Any] = Body(...)):
    """Invoke a registered tool with a JSON argument object."""
    if _registry is None:
        return _safe_error(503, "Tool registry not initialised")
    try:
        result = await _registry.invoke(name, arguments)
        return {"tool": name, "result": result}
    except ToolNotFoundError as exc:
        return _safe_error(404, str(exc))
    except DashboardContextError as exc:
        return _safe_error(409, str(exc))
    except DashboardPanelsError as exc:
        return _safe_error(422, str(exc))
    except Exception as exc:
        logger.error("invoke_tool error: name=%s, error=%s", name, exc)
        return _safe_error(500, f"Tool '{name}' failed")
