"""
Tool system - External AI coding tools and the registry that owns them.

This module provides:
- ToolDescriptor: Definition of one external tool
- ToolConfig: Registry snapshot exchanged with UI processes
- ToolRegistry: Available tools plus the active one
- Built-in descriptors for Claude Code, Codex CLI and Gemini CLI
"""

from .builtin import BUILTIN_TOOLS, FALLBACK_COMMAND, register_builtin_tools
from .registry import ToolConfig, ToolDescriptor, ToolRegistry

__all__ = [
    "ToolDescriptor",
    "ToolConfig",
    "ToolRegistry",
    "BUILTIN_TOOLS",
    "FALLBACK_COMMAND",
    "register_builtin_tools",
]
