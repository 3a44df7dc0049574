import importlib.metadata
import logging
import platform
import sys
from collections.abc import Mapping
from functools import cached_property
from http import HTTPStatus
from types import MappingProxyType
from typing import Any, Protocol

import httpx
from typing_extensions import Self

from .errors import TransportError
from .reference import ImageReference

log = logging.getLogger(__name__)

DEFAULT_HUB_URL = "https://registry.hub.docker.com"


class PageSource(Protocol):
    async def fetch_page(self, reference: ImageReference, tag: str, page: int) -> bytes: ...


class HubClient:
    PYTHON_VERSION = f"{'.'.join(map(str, sys.version_info))}"
    try:
        LIBRARY_VERSION = importlib.metadata.version("hub-digest")
    except Exception:
        LIBRARY_VERSION = "unknown"

    OS_NAME = platform.system()
    OS_VERSION = platform.release()

    HEADERS = (
        ("Accept", "application/json"),
        (
            "User-Agent",
            " ".join(
                (
                    f"hub-digest/{LIBRARY_VERSION}",
                    f"python/{PYTHON_VERSION}",
                    f"{OS_NAME}/{OS_VERSION}",
                )
            ),
        ),
    )

    def __init__(self, base_url: str = DEFAULT_HUB_URL, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout)

    @cached_property
    def headers(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self.HEADERS))

    @cached_property
    def session(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(headers=self.headers, timeout=self.timeout, follow_redirects=True)

    async def close(self) -> None:
        if "session" in self.__dict__:
            await self.session.aclose()
            del self.__dict__["session"]

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def tags_url(self, reference: ImageReference) -> str:
        return f"{self.base_url}/v2/repositories/{reference.namespace}/{reference.repository}/tags"

    async def fetch_page(self, reference: ImageReference, tag: str, page: int) -> bytes:
        """
        Fetch one page of the tags listing filtered by tag name.
        Raises TransportError on connection failures and on any status other than 200.
        """
        url = self.tags_url(reference)
        params = {"page": page, "name": tag}
        log.info("Requesting %s ...", httpx.URL(url, params=params))

        try:
            response = await self.session.get(url, params=params)
        except httpx.RequestError as e:
            raise TransportError(f"Request to {url} failed: {e!r}") from e

        log.info("Response status code %d", response.status_code)
        log.debug("Response body:\n%s", response.text)

        if response.status_code != HTTPStatus.OK:
            raise TransportError(
                f"Bad status code (got {response.status_code}, expected {HTTPStatus.OK.value})",
                response.status_code,
            )
        return response.content
