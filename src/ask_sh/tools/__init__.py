"""Tools the model can call: shell commands and web search."""

from ask_sh.tools.approval import (
    APPROVAL_QUESTION,
    ApprovalPrompter,
    ConsoleApprovalPrompter,
    parse_answer,
)
from ask_sh.tools.base import Tool, ToolCallResult, ToolError, function_schema
from ask_sh.tools.dispatcher import ToolDispatcher, available_tools
from ask_sh.tools.display import CommandStatus
from ask_sh.tools.execute_command import (
    EXECUTE_COMMAND,
    REJECTED_CONTENT,
    ExecuteCommandTool,
    execute_command_schema,
)
from ask_sh.tools.web_search import (
    WEB_SEARCH,
    SearchResult,
    SearxngClient,
    WebSearchTool,
    web_search_schema,
)

__all__ = [
    # Core types
    "Tool",
    "ToolCallResult",
    "ToolError",
    "function_schema",
    # Dispatch
    "ToolDispatcher",
    "available_tools",
    # execute_command
    "EXECUTE_COMMAND",
    "REJECTED_CONTENT",
    "ExecuteCommandTool",
    "execute_command_schema",
    "CommandStatus",
    # Approval
    "APPROVAL_QUESTION",
    "ApprovalPrompter",
    "ConsoleApprovalPrompter",
    "parse_answer",
    # web_search
    "WEB_SEARCH",
    "SearchResult",
    "SearxngClient",
    "WebSearchTool",
    "web_search_schema",
]
