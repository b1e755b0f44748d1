"""
Agent Tools
===========

Named, schema-described operations exposed to agent runtimes.

Core modules:
- registry: tool definitions, registration, readiness, invocation
- declarations: provider-specific tool declaration formats
- config: panel_tools.yaml loader
- add_dashboard_panels: the dashboard panel tool

Feature Flags:
- FEATURE_PANEL_TOOLS: Register dashboard panel tools (default: true)
"""

from src.tools.registry import (
    RegisteredTool,
    ToolDefinition,
    ToolMetadata,
    ToolNotFoundError,
    ToolRegistry,
    ToolRegistryError,
    ToolRegistryNotReadyError,
    create_tool,
    get_tool_registry,
    set_tool_registry,
)

from src.tools.declarations import (
    NormalizedToolDeclaration,
    to_anthropic_tools,
    to_openai_tools,
)

__all__ = [
    # Registry
    "RegisteredTool",
    "ToolDefinition",
    "ToolMetadata",
    "ToolNotFoundError",
    "ToolRegistry",
    "ToolRegistryError",
    "ToolRegistryNotReadyError",
    "create_tool",
    "get_tool_registry",
    "set_tool_registry",
    # Declarations
    "NormalizedToolDeclaration",
    "to_anthropic_tools",
    "to_openai_tools",
]
