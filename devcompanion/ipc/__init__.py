"""
IPC - Channel names and the in-process message bus.

Provides:
- IPC: Channel name constants
- IpcBus: Control-process side (request handlers, broadcasts)
- RendererEndpoint: UI-process side (invoke, subscribe)
"""

from .bus import IpcBus, IpcError, RendererEndpoint
from .channels import IPC

__all__ = ["IPC", "IpcBus", "IpcError", "RendererEndpoint"]
