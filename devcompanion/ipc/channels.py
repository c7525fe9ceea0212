"""IPC channel names shared by the control process and UI processes."""


class IPC:
    """Channel name constants."""

    # Mirror -> Authority, request/response: none -> ToolConfig dict
    GET_AI_TOOL_CONFIG = "get-ai-tool-config"

    # Mirror -> Authority, request/response: tool id -> bool
    SET_AI_TOOL = "set-ai-tool"

    # Authority -> every Mirror, broadcast: ToolDescriptor dict
    AI_TOOL_CHANGED = "ai-tool-changed"
