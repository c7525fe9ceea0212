"""
devcompanion - Developer tooling bundled with the desktop app.

This package provides:
- find-module: keyword search over the STRUCTURE.json structural map
- Tool selection sync between the control process and UI processes
"""

from .ipc import IPC, IpcBus, RendererEndpoint
from .structure import ModuleSearchEngine, StructureIndex, load_structure
from .sync import ToolAuthority, ToolSelectionMirror, build_registry
from .tool import ToolConfig, ToolDescriptor, ToolRegistry

__version__ = "0.1.0"
__all__ = [
    "ModuleSearchEngine",
    "StructureIndex",
    "load_structure",
    "ToolDescriptor",
    "ToolConfig",
    "ToolRegistry",
    "ToolAuthority",
    "ToolSelectionMirror",
    "build_registry",
    "IPC",
    "IpcBus",
    "RendererEndpoint",
]
