"""
Tool Registry — central registration and invocation of agent tools.

Tools are named, schema-described async operations that an agent runtime
can discover and call without compile-time binding. The registry only
accepts registrations once it has been marked ready; owners that start
earlier queue a callback with ``when_ready`` instead of guessing a delay.

Public API:
    ToolDefinition, ToolMetadata, RegisteredTool
    create_tool(name, description, schema, func) → ToolDefinition
    ToolRegistry()
    get_tool_registry() / set_tool_registry(registry)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel

from src.tools.declarations import NormalizedToolDeclaration

logger = logging.getLogger(__name__)

ToolFunc = Callable[[Mapping[str, Any]], Awaitable[Any]]
ReadyCallback = Callable[["ToolRegistry"], None]


# ── Errors ─────────────────────────────────────────────────────────

class ToolRegistryError(Exception):
    """Raised on invalid registry operations (duplicates, unknown tools)."""


class ToolRegistryNotReadyError(ToolRegistryError):
    """Raised when registering before the registry has been marked ready."""


class ToolNotFoundError(ToolRegistryError, KeyError):
    """Raised when a tool name is not registered."""

    def __str__(self) -> str:
        return Exception.__str__(self)


# ── Definitions ────────────────────────────────────────────────────

@dataclass(frozen=True)
class ToolDefinition:
    """A named operation with a pydantic input contract."""
    name: str
    description: str
    schema: Type[BaseModel]
    func: ToolFunc

    def parameters(self) -> Dict[str, Any]:
        return self.schema.model_json_schema(by_alias=True)

    def to_declaration(self) -> NormalizedToolDeclaration:
        return NormalizedToolDeclaration(
            name=self.name,
            description=self.description,
            parameters=self.parameters(),
        )


@dataclass(frozen=True)
class ToolMetadata:
    category: str = "utilities"
    tags: tuple = ()


@dataclass
class RegisteredTool:
    """A registered tool with its owner and discovery metadata."""
    definition: ToolDefinition
    owner_id: str
    metadata: ToolMetadata
    registered_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.definition.name,
            "description": self.definition.description,
            "owner_id": self.owner_id,
            "category": self.metadata.category,
            "tags": list(self.metadata.tags),
            "registered_at": self.registered_at,
        }


def create_tool(name: str, description: str, schema: Type[BaseModel], func: ToolFunc) -> ToolDefinition:
    """Build a ToolDefinition. Raises ValueError for an empty name."""
    if not name or not name.strip():
        raise ValueError("Tool name must not be empty")
    return ToolDefinition(name=name, description=description, schema=schema, func=func)


# ── Registry ───────────────────────────────────────────────────────

class ToolRegistry:
    """Thread-safe registry of agent tools."""

    def __init__(self, ready: bool = False) -> None:
        self._lock = threading.Lock()
        self._tools: Dict[str, RegisteredTool] = {}
        self._ready = ready
        self._ready_callbacks: List[ReadyCallback] = []

    # -- readiness ------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        with self._lock:
            return self._ready

    def mark_ready(self) -> None:
        """Accept registrations from now on and run queued callbacks in order."""
        with self._lock:
            if self._ready:
                return
            self._ready = True
            callbacks, self._ready_callbacks = self._ready_callbacks, []
        logger.info("tool_registry_ready: pending_callbacks=%d", len(callbacks))
        for callback in callbacks:
            try:
                callback(self)
            except Exception as exc:
                logger.error("tool_registry_ready_callback_failed: %s", exc)

    def when_ready(self, callback: ReadyCallback) -> bool:
        """Run ``callback`` once the registry is ready.

        Returns True if it ran immediately, False if it was queued.
        """
        with self._lock:
            if not self._ready:
                self._ready_callbacks.append(callback)
                return False
        callback(self)
        return True

    # -- registration ---------------------------------------------------

    def register_tool(
        self,
        definition: ToolDefinition,
        owner_id: str,
        metadata: Optional[ToolMetadata] = None,
    ) -> RegisteredTool:
        """Register a tool under its name.

        Raises:
            ToolRegistryNotReadyError: If the registry is not ready yet
            ToolRegistryError: If the name is already registered
        """
        with self._lock:
            if not self._ready:
                raise ToolRegistryNotReadyError(
                    f"Cannot register tool '{definition.name}': registry is not ready"
                )
            if definition.name in self._tools:
                raise ToolRegistryError(f"Tool '{definition.name}' is already registered")
            entry = RegisteredTool(
                definition=definition,
                owner_id=owner_id,
                metadata=metadata or ToolMetadata(),
            )
            self._tools[definition.name] = entry
        logger.info("tool_registered: name=%s, owner=%s", definition.name, owner_id)
        return entry

    def unregister_tool(self, name: str) -> bool:
        """Remove a tool. Returns True if found and removed."""
        with self._lock:
            return self._tools.pop(name, None) is not None

    def get_tool(self, name: str) -> Optional[RegisteredTool]:
        with self._lock:
            return self._tools.get(name)

    def list_tools(self) -> List[RegisteredTool]:
        with self._lock:
            return list(self._tools.values())

    def declarations(self) -> List[NormalizedToolDeclaration]:
        return [entry.definition.to_declaration() for entry in self.list_tools()]

    def debug_tool_registry(self) -> Dict[str, Any]:
        """Log and return a snapshot of the registry."""
        with self._lock:
            snapshot = {
                "ready": self._ready,
                "pending_callbacks": len(self._ready_callbacks),
                "tools": [entry.to_dict() for entry in self._tools.values()],
            }
        logger.info(
            "tool_registry_debug: ready=%s, tools=%s",
            snapshot["ready"], [t["name"] for t in snapshot["tools"]],
        )
        return snapshot

    # -- invocation -----------------------------------------------------

    async def invoke(self, name: str, arguments: Mapping[str, Any]) -> Any:
        """Call a registered tool with raw arguments.

        Raises:
            ToolNotFoundError: If no tool has that name
        """
        entry = self.get_tool(name)
        if entry is None:
            raise ToolNotFoundError(f"Tool '{name}' not found")
        logger.debug("tool_invoked: name=%s", name)
        return await entry.definition.func(arguments)


_registry: Optional[ToolRegistry] = None
_registry_lock = threading.Lock()


def get_tool_registry() -> ToolRegistry:
    """Return the process-wide registry, creating it (not ready) on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = ToolRegistry()
        return _registry


def set_tool_registry(registry: Optional[ToolRegistry]) -> None:
    global _registry
    with _registry_lock:
        _registry = registry
