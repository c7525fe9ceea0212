"""
Built-in Tool Definitions - Registers the tools shipped with the app.

Call `register_builtin_tools(registry)` before loading user tool files;
files with the same id replace these defaults.
"""

from .registry import ToolDescriptor, ToolRegistry

# Start command used by UI processes before any tool is known
FALLBACK_COMMAND = "claude"

BUILTIN_TOOLS = (
    ToolDescriptor(
        id="claude",
        name="Claude Code",
        command="claude",
        commands={
            "init": "/init",
            "commit": "/commit",
            "review": "/review",
        },
        supports_plugins=True,
        description="Anthropic's agentic coding CLI",
    ),
    ToolDescriptor(
        id="codex",
        name="Codex CLI",
        command="codex",
        commands={
            "init": "/init",
            "review": "/review",
        },
        supports_plugins=False,
        description="OpenAI's coding agent CLI",
    ),
    ToolDescriptor(
        id="gemini",
        name="Gemini CLI",
        command="gemini",
        commands={},
        supports_plugins=False,
        description="Google's Gemini command-line agent",
    ),
)


def register_builtin_tools(registry: ToolRegistry) -> None:
    """Register all built-in tools. Safe to call more than once."""
    for tool in BUILTIN_TOOLS:
        registry.register(tool)
