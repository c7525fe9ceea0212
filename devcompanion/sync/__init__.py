"""
Sync System - Keep the selected tool consistent across processes.

Provides:
- ToolAuthority: Canonical owner in the control process
- ToolSelectionMirror: Cached copy in each UI process
- build_registry: Registry construction at control-process start
"""

from .authority import SwitchPolicy, ToolAuthority, build_registry
from .mirror import FEATURES, MirrorCache, ToolSelectionMirror, ToolSelectorView

__all__ = [
    "ToolAuthority",
    "SwitchPolicy",
    "build_registry",
    "ToolSelectionMirror",
    "MirrorCache",
    "ToolSelectorView",
    "FEATURES",
]
