from enum import Enum

import argclass

from .client import DEFAULT_HUB_URL
from .search import DEFAULT_ARCHITECTURE, DEFAULT_OS, DEFAULT_PAGE_LIMIT


class RunMode(str, Enum):
    ACTION = "action"
    STDIO = "stdio"


class Parser(argclass.Parser):
    image: str = argclass.Argument(default="", help="Image to look up, e.g. python:3.11-slim or bitnami/redis:7.2")
    os: str = argclass.Argument(default=DEFAULT_OS, help="Operating system of the image variant")
    architecture: str = argclass.Argument(
        default=DEFAULT_ARCHITECTURE,
        help="Architecture of the image variant, with optional variant qualifier (arm/v7)",
    )
    page_limit: int = argclass.Argument(
        default=DEFAULT_PAGE_LIMIT,
        help="Maximum number of tag pages to request",
    )
    url: str = argclass.Argument(default=DEFAULT_HUB_URL, help="Docker Hub API base URL")
    timeout: float = argclass.Argument(default=30.0, help="Per request timeout in seconds")
    mode: RunMode = argclass.EnumArgument(
        RunMode, default=RunMode.ACTION, lowercase=True, help="One-shot lookup or MCP stdio server"
    )
    github_output: str = argclass.Argument(
        default="",
        env_var="GITHUB_OUTPUT",
        help="File to append step outputs to, results are printed as JSON when unset",
    )

    log_level: int = argclass.LogLevel
