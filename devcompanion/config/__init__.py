"""
Configuration System - Load configs from multiple sources with precedence.

Provides:
- ConfigLoader: Load and merge configuration from files
- MarkdownParser: Parse markdown tool files with YAML frontmatter

Configuration precedence (low → high):
1. ~/.devcompanion/config.json (global defaults)
2. .devcompanion/config.json (project config)
3. Environment variables (DEVCOMPANION_*)
4. Runtime overrides

Tool definitions are read from .devcompanion/tools/*.md.
"""

from .loader import CompanionConfig, ConfigLoader, load_config
from .markdown import MarkdownParser, load_all_tools, load_tool_from_file

__all__ = [
    "CompanionConfig",
    "ConfigLoader",
    "load_config",
    "MarkdownParser",
    "load_all_tools",
    "load_tool_from_file",
]
