"""
Tool-related exceptions shared by tools, the dispatcher and the reasoner.
"""


class ToolError(Exception):
    """Base class for every error raised while resolving or running a tool."""

    def __init__(self, message: str, *, tool_name: str | None = None):
        self.tool_name = tool_name
        self.message = message
        super().__init__(message)


class ToolNotFoundError(ToolError):
    """Raised when the model asks for a tool that is not registered."""

    def __init__(self, tool_name: str):
        super().__init__(f"Tool '{tool_name}' not found", tool_name=tool_name)


class ToolExecutionError(ToolError):
    """Raised when a tool fails to execute for any reason."""

    def __init__(self, message: str, *, tool_name: str):
        super().__init__(f"Error executing tool: {message}", tool_name=tool_name)
