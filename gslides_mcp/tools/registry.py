"""
Central registry for all Google Slides tools.
Provides tool discovery, categorization, and metadata.
"""

from typing import Any, Dict, List, Optional
from enum import Enum

from gslides_mcp.tools.background import get_background_tools
from gslides_mcp.tools.base import ToolDefinition
from gslides_mcp.tools.comments import get_comment_tools
from gslides_mcp.tools.object_editing import get_object_editing_tools
from gslides_mcp.tools.objects import get_object_tools
from gslides_mcp.tools.presentations import get_presentation_tools
from gslides_mcp.tools.slides import get_slide_tools
from gslides_mcp.tools.tables import get_table_tools
from gslides_mcp.tools.text import get_text_tools
from gslides_mcp.tools.text_editing import get_text_editing_tools
from gslides_mcp.tools.theme import get_theme_tools


class ToolCategory(Enum):
    """Tool categories."""
    PRESENTATION = "presentation"
    SLIDES = "slides"
    OBJECTS = "objects"
    TABLES = "tables"
    COMMENTS = "comments"
    TEXT = "text"
    DESIGN = "design"


class ToolRegistry:
    """
    Central registry for all available tools.
    Provides tool discovery and metadata.
    """

    def __init__(self):
        """Initialize tool registry."""
        self.tools: Dict[str, ToolDefinition] = {}
        self._initialize_tools()

    def _initialize_tools(self) -> None:
        """Register every tool family in advertised order."""
        for factory in (
            get_presentation_tools,
            get_slide_tools,
            get_object_tools,
            get_object_editing_tools,
            get_table_tools,
            get_comment_tools,
            get_text_tools,
            get_text_editing_tools,
            get_background_tools,
            get_theme_tools,
        ):
            for tool in factory():
                self.register_tool(tool)

    def register_tool(self, tool: ToolDefinition) -> None:
        """
        Register a tool in the registry.

        Args:
            tool: Tool definition

        Raises:
            ValueError: If a tool with the same name is already registered
        """
        if tool.name in self.tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self.tools[tool.name] = tool

    def get_tool(self, tool_name: str) -> Optional[ToolDefinition]:
        """
        Get a tool by name.

        Args:
            tool_name: Name of tool

        Returns:
            Tool definition or None if not found
        """
        return self.tools.get(tool_name)

    def get_tools_by_category(self, category: ToolCategory) -> List[ToolDefinition]:
        return [tool for tool in self.tools.values() if tool.category == category.value]

    def get_all_tools(self) -> List[ToolDefinition]:
        return list(self.tools.values())

    def list_tools(self) -> List[Dict[str, Any]]:
        """
        List all tools with their metadata.

        Returns:
            List of tool metadata dictionaries
        """
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "category": tool.category,
                "input_schema": tool.input_schema,
            }
            for tool in self.tools.values()
        ]

