"""
MCP servers for Google Slides.

Available servers:
- google_slides_server: Google Slides and Drive operations via OAuth2
"""

from .google_slides_server import GoogleSlidesMCPServer

__all__ = [
    "GoogleSlidesMCPServer",
]
