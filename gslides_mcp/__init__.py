"""
Google Slides MCP server: presentation, slide, object, table, comment,
text and design tools over the Model Context Protocol.
"""

__version__ = "0.1.0"
