"""
Look up Docker Hub image digests by tag and platform.

Call `find_image(image="python:3.11-slim", os="linux", architecture="arm64")`
to get the digest and size of one platform variant of a tag, together with the
full tag and image records returned by Docker Hub.

Architectures with a variant qualifier are written as `arm/v7`. Images without
a namespace resolve to official images (`library/`), images without a tag to
`latest`.
"""

from collections.abc import Awaitable, Callable
from textwrap import dedent
from typing import Any

from mcp.server import FastMCP

from . import tools


def register_tool(mcp: FastMCP, tool_func: Callable[..., Awaitable[Any]], **kwargs: Any) -> None:
    mcp.add_tool(tool_func, description=dedent(tool_func.__doc__ or "") or "", **kwargs)


def create_mcp_app(**kwargs: Any) -> FastMCP:
    mcp = FastMCP(name="hub-digest", instructions=dedent(__doc__).strip(), **kwargs)
    register_tool(mcp, tools.find_image)
    return mcp
