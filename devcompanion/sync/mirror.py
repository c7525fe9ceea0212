"""
Tool Selection Mirror - UI-process cache of the active tool.

Each UI process owns one mirror. The mirror never decides which tool is
active; it asks the control process and waits for the AI_TOOL_CHANGED
broadcast, which is the only thing that replaces the cached tool.

The selector control is optimistic: it shows the requested tool while the
request is pending. Two handlers settle it:
- apply_broadcast: adopt the broadcast tool and refresh the view
- revert_on_rejection: put the selector back on the last confirmed tool

Both are idempotent and may run in either order, since the direct answer
and the broadcast travel on independent channels.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..config.loader import CompanionConfig, ConfigLoader
from ..ipc import IPC, RendererEndpoint
from ..logger import get_logger
from ..tool import FALLBACK_COMMAND, ToolConfig, ToolDescriptor

# Feature keys understood by supports_feature
FEATURES = frozenset({"plugins", "init", "commit"})

ToolChangeCallback = Callable[[ToolDescriptor], None]


@dataclass
class MirrorCache:
    """Cached copy of the control process's tool state."""
    current_tool: Optional[ToolDescriptor] = None
    available_tools: Dict[str, ToolDescriptor] = field(default_factory=dict)

    @property
    def confirmed_id(self) -> Optional[str]:
        return self.current_tool.id if self.current_tool else None


@dataclass
class ToolSelectorView:
    """View model for the tool selector and the widgets that depend on it.

    Attributes:
        options: (tool id, label) pairs for the selector
        value: Tool id the selector currently shows
        pending: Tool id of an unanswered switch request
        start_label: Text of the start button
        plugins_enabled: Whether the plugins panel is available
    """
    options: List[Tuple[str, str]] = field(default_factory=list)
    value: Optional[str] = None
    pending: Optional[str] = None
    start_label: str = ""
    plugins_enabled: bool = False


class ToolSelectionMirror:
    """UI-process side of tool selection.

    Example:
        mirror = ToolSelectionMirror.from_config(bus.connect(), on_tool_change=restart_terminal)
        await mirror.init()
        await mirror.request_switch("codex")
        mirror.get_start_command()  # "codex" once the broadcast arrived
    """

    def __init__(
        self,
        endpoint: RendererEndpoint,
        on_tool_change: Optional[ToolChangeCallback] = None,
        switch_timeout: Optional[float] = CompanionConfig.switch_timeout,
    ):
        """Initialize the mirror.

        Args:
            endpoint: This process's connection to the control process
            on_tool_change: Called after the cached tool changes
            switch_timeout: Seconds to wait for a switch answer before
                reverting; None waits indefinitely. Use from_config to take
                it from the layered configuration.
        """
        self._endpoint = endpoint
        self._on_tool_change = on_tool_change
        self.switch_timeout = switch_timeout
        self.cache = MirrorCache()
        self.view = ToolSelectorView()
        self._logger = get_logger()
        self._subscribed = False

    @classmethod
    def from_config(
        cls,
        endpoint: RendererEndpoint,
        config: Optional[CompanionConfig] = None,
        on_tool_change: Optional[ToolChangeCallback] = None,
    ) -> "ToolSelectionMirror":
        """Create a mirror whose switch timeout comes from the configuration.

        Args:
            endpoint: This process's connection to the control process
            config: Loaded configuration (default: loaded from the current
                project)
            on_tool_change: Called after the cached tool changes
        """
        config = config or ConfigLoader().load()
        return cls(endpoint, on_tool_change=on_tool_change, switch_timeout=config.switch_timeout)

    @property
    def endpoint(self) -> RendererEndpoint:
        return self._endpoint

    async def init(self) -> None:
        """Fetch the initial config and subscribe to tool changes."""
        raw = await self._endpoint.invoke(IPC.GET_AI_TOOL_CONFIG)
        config = ToolConfig.from_dict(raw)

        self.cache.available_tools = dict(config.available_tools)
        self.view.options = self._options()
        if config.active_tool is not None:
            self.apply_broadcast(config.active_tool)

        if not self._subscribed:
            self._endpoint.on(IPC.AI_TOOL_CHANGED, self._on_broadcast)
            self._subscribed = True

        self._logger.info("mirror", "initialized", {
            "endpoint": self._endpoint.id,
            "active": self.cache.confirmed_id,
            "tools": list(self.cache.available_tools),
        })

    def dispose(self) -> None:
        """Stop listening for tool changes."""
        if self._subscribed:
            self._endpoint.off(IPC.AI_TOOL_CHANGED, self._on_broadcast)
            self._subscribed = False

    async def request_switch(self, tool_id: str) -> bool:
        """Ask the control process to switch tools.

        The selector shows ``tool_id`` while the request is pending; the
        cached tool only changes when the broadcast arrives.

        Returns:
            True if the control process accepted the switch. False on
            rejection or timeout, after reverting the selector.
        """
        self.view.value = tool_id
        self.view.pending = tool_id

        request = self._endpoint.invoke(IPC.SET_AI_TOOL, tool_id)
        try:
            if self.switch_timeout is None:
                accepted = bool(await request)
            else:
                accepted = bool(await asyncio.wait_for(request, self.switch_timeout))
        except asyncio.TimeoutError:
            self._logger.warn("mirror", "switch_timeout", {
                "tool_id": tool_id,
                "timeout": self.switch_timeout,
            })
            accepted = False

        if not accepted:
            self._logger.info("mirror", "switch_rejected", {
                "tool_id": tool_id,
                "confirmed": self.cache.confirmed_id,
            })
            self.revert_on_rejection(tool_id)
        return accepted

    def apply_broadcast(self, tool: Union[ToolDescriptor, Dict[str, Any]]) -> None:
        """Adopt a tool announced by the control process."""
        if isinstance(tool, dict):
            tool = ToolDescriptor.from_dict(tool)

        changed = self.cache.current_tool != tool
        self.cache.current_tool = tool
        if self.cache.available_tools.get(tool.id) != tool:
            self.cache.available_tools[tool.id] = tool
            self.view.options = self._options()

        if self.view.pending == tool.id:
            self.view.pending = None
        self._refresh_view()

        if changed:
            self._logger.debug("mirror", "tool_changed", {"tool_id": tool.id})
            if self._on_tool_change is not None:
                self._on_tool_change(tool)

    def revert_on_rejection(self, tool_id: str) -> None:
        """Put the selector back on the last confirmed tool.

        Only applies while the rejected request is the pending one (or no
        request is pending), so a newer request keeps its optimistic value.
        """
        if self.view.pending not in (None, tool_id):
            return
        self.view.pending = None
        self.view.value = self.cache.confirmed_id

    def get_current_tool(self) -> Optional[ToolDescriptor]:
        """Get the cached active tool."""
        return self.cache.current_tool

    def get_start_command(self) -> str:
        """Get the start command for the cached tool."""
        tool = self.cache.current_tool
        return tool.command if tool else FALLBACK_COMMAND

    def get_command(self, action: str) -> Optional[str]:
        """Get the cached tool's command for an action, or None if absent."""
        tool = self.cache.current_tool
        if tool is None:
            return None
        return tool.commands.get(action)

    def supports_feature(self, feature: str) -> bool:
        """Check if the cached tool supports a feature.

        Recognized features are "plugins", "init" and "commit"; anything
        else is unsupported.
        """
        tool = self.cache.current_tool
        if tool is None or feature not in FEATURES:
            return False
        if feature == "plugins":
            return tool.supports_plugins
        return feature in tool.commands

    def _on_broadcast(self, payload: Any) -> None:
        self.apply_broadcast(payload)

    def _options(self) -> List[Tuple[str, str]]:
        return [(t.id, t.short_name) for t in self.cache.available_tools.values()]

    def _refresh_view(self) -> None:
        tool = self.cache.current_tool
        if tool is None:
            return
        self.view.value = tool.id
        self.view.start_label = f"Start {tool.name}"
        self.view.plugins_enabled = tool.supports_plugins
