"""
Tool Authority - Canonical owner of the active tool in the control process.

The authority answers two requests and emits one broadcast:
- GET_AI_TOOL_CONFIG: current ToolConfig for a UI process's initial sync
- SET_AI_TOOL: validate and apply a switch, answer True/False
- AI_TOOL_CHANGED: new descriptor sent to every UI process after a switch

It is the only writer of the active tool, so no locking is needed.
"""

from typing import Any, Callable, Dict, Optional

from ..config.loader import CompanionConfig, ConfigLoader
from ..config.markdown import load_all_tools
from ..ipc import IPC, IpcBus
from ..logger import get_logger
from ..logging_config import configure_from_config
from ..tool import ToolDescriptor, ToolRegistry, register_builtin_tools

SwitchPolicy = Callable[[ToolDescriptor], bool]


class ToolAuthority:
    """Control-process side of tool selection.

    Example:
        authority = ToolAuthority(registry, bus)
        authority.attach()
        # inside the control process's event loop
        await bus.connect().invoke(IPC.SET_AI_TOOL, "codex")  # True
    """

    def __init__(
        self,
        registry: ToolRegistry,
        bus: IpcBus,
        policy: Optional[SwitchPolicy] = None,
    ):
        """Initialize the authority.

        Args:
            registry: Registry holding the canonical tool state
            bus: Bus used to answer requests and broadcast changes
            policy: Optional check run on a known tool before switching;
                returning False rejects the switch
        """
        self.registry = registry
        self.bus = bus
        self.policy = policy
        self._logger = get_logger()
        self._attached = False

    def attach(self) -> None:
        """Register request handlers on the bus."""
        if self._attached:
            return
        self.bus.handle(IPC.GET_AI_TOOL_CONFIG, self.get_config)
        self.bus.handle(IPC.SET_AI_TOOL, self.set_tool)
        self._attached = True

    def detach(self) -> None:
        self.bus.remove_handler(IPC.GET_AI_TOOL_CONFIG)
        self.bus.remove_handler(IPC.SET_AI_TOOL)
        self._attached = False

    @property
    def active_tool(self) -> Optional[ToolDescriptor]:
        return self.registry.active

    def get_config(self) -> Dict[str, Any]:
        """Answer GET_AI_TOOL_CONFIG with the wire form of the ToolConfig."""
        return self.registry.snapshot().to_dict()

    def set_tool(self, tool_id: str) -> bool:
        """Answer SET_AI_TOOL.

        Args:
            tool_id: Requested tool id

        Returns:
            True if the tool was activated and a broadcast was scheduled,
            False if the id is unknown, the policy rejected it or the bus
            has no event loop to broadcast on
        """
        tool = self.registry.get(tool_id) if isinstance(tool_id, str) else None
        if tool is None:
            self._logger.warn("authority", "switch_rejected", {
                "tool_id": tool_id,
                "reason": "unknown_tool",
            })
            return False

        if self.policy is not None and not self.policy(tool):
            self._logger.warn("authority", "switch_rejected", {
                "tool_id": tool_id,
                "reason": "policy",
            })
            return False

        if not self.bus.can_broadcast():
            self._logger.error("authority", "switch_rejected", {
                "tool_id": tool_id,
                "reason": "no_event_loop",
            })
            return False

        previous = self.registry.active
        self.registry.activate(tool_id)
        delivered = self.bus.broadcast(IPC.AI_TOOL_CHANGED, tool.to_dict())

        self._logger.info("authority", "tool_switched", {
            "from": previous.id if previous else None,
            "to": tool_id,
            "mirrors": delivered,
        })
        return True


def build_registry(
    config: Optional[CompanionConfig] = None,
    loader: Optional[ConfigLoader] = None,
) -> ToolRegistry:
    """Build the control process's registry.

    Built-in tools are registered first, then tool definition files (which
    replace built-ins with the same id), then the configured default tool is
    activated. An unknown default falls back to the first registered tool.
    """
    loader = loader or ConfigLoader()
    config = config or loader.load()
    configure_from_config(config)
    logger = get_logger()

    registry = ToolRegistry()
    register_builtin_tools(registry)
    for tool in load_all_tools(loader.get_tools_dir(config)):
        registry.register(tool, replace=True)

    if not registry.activate(config.default_tool):
        fallback = next(iter(registry.list_ids()), None)
        logger.warn("authority", "default_tool_unknown", {
            "default_tool": config.default_tool,
            "fallback": fallback,
        })
        if fallback is not None:
            registry.activate(fallback)

    logger.info("authority", "registry_ready", {
        "tools": registry.list_ids(),
        "active": registry.active.id if registry.active else None,
    })
    return registry
