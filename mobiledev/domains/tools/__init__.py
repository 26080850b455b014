from .catalogue import CATALOGUE, TOOLS_BY_NAME, ToolSpec
from .result import ToolContent, ToolResult

__all__ = ["CATALOGUE", "TOOLS_BY_NAME", "ToolSpec", "ToolContent", "ToolResult"]
