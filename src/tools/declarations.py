"""
Tool Declarations — provider-agnostic descriptions of registered tools.

Tools are described once as NormalizedToolDeclaration (JSON Schema params)
and converted to each agent provider's native tool format.

Public API:
    NormalizedToolDeclaration
    to_openai_tools(tools)     → list[dict]
    to_anthropic_tools(tools)  → list[dict]
    convert_declarations(tools, fmt)
"""

from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass
class NormalizedToolDeclaration:
    """Provider-agnostic tool/function declaration.

    Example:
        NormalizedToolDeclaration(
            name="add_dashboard_panels",
            description="Add panels to the dashboard",
            parameters={
                "type": "object",
                "properties": {"panels": {"type": "array", "items": {...}}},
                "required": ["panels"],
            }
        )
    """
    name: str
    description: str
    parameters: Dict[str, Any]


def to_openai_tools(tools: List[NormalizedToolDeclaration]) -> List[dict]:
    """Convert normalized declarations to OpenAI tools format."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            },
        }
        for tool in tools
    ]


def to_anthropic_tools(tools: List[NormalizedToolDeclaration]) -> List[dict]:
    """Convert normalized declarations to Anthropic tools format."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "input_schema": tool.parameters,
        }
        for tool in tools
    ]


_CONVERTERS = {
    "openai": to_openai_tools,
    "anthropic": to_anthropic_tools,
}


def convert_declarations(tools: List[NormalizedToolDeclaration], fmt: str) -> List[dict]:
    """Convert to the named provider format. Raises ValueError for unknown formats."""
    converter = _CONVERTERS.get(fmt)
    if converter is None:
        raise ValueError(f"Unknown tool declaration format: {fmt}")
    return converter(tools)
