"""Tools package for gamecode."""

from gamecode.tools.base import ToolAdapter, ToolSchema
from gamecode.tools.registry import ToolDescriptor, ToolRegistry

__all__ = [
    "ToolAdapter",
    "ToolDescriptor",
    "ToolRegistry",
    "ToolSchema",
]
