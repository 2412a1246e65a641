from tools.base import BaseTool
from tools.context import QueryContextTool, StoreContextTool
from tools.search import ExaSearchTool, SearchTool, StubSearchTool

__all__ = [
    "BaseTool",
    "ExaSearchTool",
    "QueryContextTool",
    "SearchTool",
    "StoreContextTool",
    "StubSearchTool",
]
