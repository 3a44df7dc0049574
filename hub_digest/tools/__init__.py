"""hub-digest MCP tools."""

from .find_image import find_image

__all__ = ["find_image"]
