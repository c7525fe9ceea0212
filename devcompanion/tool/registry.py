"""
Tool Registry - External AI coding tools known to the control process.

A tool is an interchangeable command-line assistant (Claude Code, Codex CLI,
...). The registry holds every available descriptor plus the active one.
Only the control process owns a registry; UI processes see copies of its
state through the synchronizer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ToolDescriptor:
    """Definition of an external coding tool.

    Attributes:
        id: Unique identifier (e.g., "claude")
        name: Display name (e.g., "Claude Code")
        command: Executable started by the "Start" button
        commands: Action name -> command string (e.g., {"init": "/init"})
        supports_plugins: True if the tool can load plugins
        description: Optional longer description
    """
    id: str
    name: str
    command: str
    commands: Dict[str, str] = field(default_factory=dict)
    supports_plugins: bool = False
    description: str = ""

    @property
    def short_name(self) -> str:
        """Name used for selector options ("Claude Code" -> "Claude")."""
        return self.name.replace(" Code", "").replace(" CLI", "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "name": self.name,
            "command": self.command,
            "commands": dict(self.commands),
            "supportsPlugins": self.supports_plugins,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolDescriptor":
        """Build a descriptor from its wire representation."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            command=data.get("command", data["id"]),
            commands=dict(data.get("commands") or {}),
            supports_plugins=bool(data.get("supportsPlugins", False)),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class ToolConfig:
    """Snapshot of the registry sent to UI processes.

    Attributes:
        active_tool: Currently active tool, or None before activation
        available_tools: Tool id -> descriptor
    """
    active_tool: Optional[ToolDescriptor]
    available_tools: Dict[str, ToolDescriptor] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "activeTool": self.active_tool.to_dict() if self.active_tool else None,
            "availableTools": {
                tool_id: tool.to_dict() for tool_id, tool in self.available_tools.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolConfig":
        active = data.get("activeTool")
        return cls(
            active_tool=ToolDescriptor.from_dict(active) if active else None,
            available_tools={
                tool_id: ToolDescriptor.from_dict(tool)
                for tool_id, tool in (data.get("availableTools") or {}).items()
            },
        )


class ToolRegistry:
    """Available tools plus the active one.

    Example:
        registry = ToolRegistry()
        register_builtin_tools(registry)
        registry.activate("codex")
        registry.active.command  # "codex"
    """

    def __init__(self):
        self._tools: Dict[str, ToolDescriptor] = {}
        self._active_id: Optional[str] = None

    def register(self, tool: ToolDescriptor, replace: bool = False) -> ToolDescriptor:
        """Register a tool descriptor.

        Re-registering an existing id is a no-op unless ``replace`` is set,
        so built-ins can be overridden by definition files.

        Returns:
            The descriptor stored in the registry
        """
        if tool.id in self._tools and not replace:
            return self._tools[tool.id]
        self._tools[tool.id] = tool
        return tool

    def get(self, tool_id: str) -> Optional[ToolDescriptor]:
        """Get a tool by id, or None if unknown."""
        return self._tools.get(tool_id)

    def list(self) -> List[ToolDescriptor]:
        return list(self._tools.values())

    def list_ids(self) -> List[str]:
        return list(self._tools.keys())

    def is_registered(self, tool_id: str) -> bool:
        return tool_id in self._tools

    @property
    def active(self) -> Optional[ToolDescriptor]:
        """Currently active tool."""
        if self._active_id is None:
            return None
        return self._tools.get(self._active_id)

    def activate(self, tool_id: str) -> bool:
        """Make a registered tool the active one.

        Returns:
            True if the tool exists and is now active
        """
        if tool_id not in self._tools:
            return False
        self._active_id = tool_id
        return True

    def snapshot(self) -> ToolConfig:
        """Current state as a ToolConfig."""
        return ToolConfig(active_tool=self.active, available_tools=dict(self._tools))

    def clear(self) -> None:
        """Remove every tool. Used for testing."""
        self._tools.clear()
        self._active_id = None
