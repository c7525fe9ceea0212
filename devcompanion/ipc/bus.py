"""
IPC Bus - In-process implementation of the control/UI message contract.

The control process registers request handlers with `handle`; each UI
process gets a `RendererEndpoint` from `connect` and uses `invoke` for
request/response traffic and `on` for broadcasts.

Broadcasts are scheduled with ``loop.call_soon`` and never run inside the
request handler that triggered them, so a UI process may see a broadcast
before or after the direct response of its own request.
"""

import asyncio
import inspect
import itertools
from typing import Any, Callable, Dict, List, Optional

from ..logger import get_logger

Handler = Callable[..., Any]
Listener = Callable[[Any], None]


class IpcError(Exception):
    """Misuse of the bus: unknown channel or duplicate handler."""


class RendererEndpoint:
    """UI-process side of the bus."""

    _ids = itertools.count(1)

    def __init__(self, bus: "IpcBus"):
        self.id = next(self._ids)
        self._bus = bus
        self._listeners: Dict[str, List[Listener]] = {}
        self.connected = True

    async def invoke(self, channel: str, *args: Any) -> Any:
        """Send a request to the control process and await its answer."""
        if not self.connected:
            raise IpcError(f"Endpoint {self.id} is disconnected")
        return await self._bus._dispatch_request(channel, *args)

    def on(self, channel: str, listener: Listener) -> None:
        """Subscribe to a broadcast channel."""
        self._listeners.setdefault(channel, []).append(listener)

    def off(self, channel: str, listener: Listener) -> None:
        """Unsubscribe from a broadcast channel."""
        listeners = self._listeners.get(channel, [])
        if listener in listeners:
            listeners.remove(listener)

    def close(self) -> None:
        """Disconnect from the bus; pending broadcasts are dropped."""
        self.connected = False
        self._bus._endpoints.pop(self.id, None)

    def _deliver(self, channel: str, payload: Any) -> None:
        if not self.connected:
            return
        for listener in list(self._listeners.get(channel, [])):
            listener(payload)


class IpcBus:
    """Request/response and broadcast channels within one event loop.

    Example:
        bus = IpcBus()
        bus.handle(IPC.SET_AI_TOOL, authority.set_tool)
        renderer = bus.connect()
        ok = await renderer.invoke(IPC.SET_AI_TOOL, "codex")
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._handlers: Dict[str, Handler] = {}
        self._endpoints: Dict[int, RendererEndpoint] = {}
        self._logger = get_logger()

    def handle(self, channel: str, handler: Handler) -> None:
        """Register the control-process handler for a request channel."""
        if channel in self._handlers:
            raise IpcError(f"Handler already registered for '{channel}'")
        self._handlers[channel] = handler

    def remove_handler(self, channel: str) -> None:
        self._handlers.pop(channel, None)

    def connect(self) -> RendererEndpoint:
        """Connect a new UI process."""
        endpoint = RendererEndpoint(self)
        self._endpoints[endpoint.id] = endpoint
        return endpoint

    @property
    def endpoints(self) -> List[RendererEndpoint]:
        return list(self._endpoints.values())

    def can_broadcast(self) -> bool:
        """Whether broadcast() has an open event loop to schedule on."""
        if self._loop is not None:
            return not self._loop.is_closed()
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return False
        return True

    def broadcast(self, channel: str, payload: Any) -> int:
        """Schedule delivery of a payload to every connected endpoint.

        Returns:
            Number of endpoints the payload was scheduled for

        Raises:
            IpcError: If there is no open event loop to schedule on
        """
        if not self.can_broadcast():
            raise IpcError(f"No event loop to broadcast '{channel}' on")
        loop = self._loop or asyncio.get_running_loop()
        endpoints = self.endpoints
        for endpoint in endpoints:
            loop.call_soon(endpoint._deliver, channel, payload)
        self._logger.debug("ipc", "broadcast", {
            "channel": channel,
            "endpoints": len(endpoints),
        })
        return len(endpoints)

    async def _dispatch_request(self, channel: str, *args: Any) -> Any:
        handler = self._handlers.get(channel)
        if handler is None:
            raise IpcError(f"No handler registered for '{channel}'")
        result = handler(*args)
        if inspect.isawaitable(result):
            result = await result
        return result
