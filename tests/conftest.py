"""Test fixtures for hub-digest."""

import asyncio
import json
import re
import socket
from collections.abc import AsyncIterator
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

import pytest
import uvicorn
from pydantic import BaseModel
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from hub_digest.client import HubClient
from hub_digest.context import CLIENT
from hub_digest.hub_types import ImageVariant, TagRecord
from hub_digest.reference import ImageReference

# =============================================================================
# Default test data factories
# =============================================================================


def make_variant(
    architecture: str = "amd64",
    os: str = "linux",
    variant: str | None = None,
    digest: str = "sha256:aaaa",
    size: int = 1024,
    **extra: Any,
) -> ImageVariant:
    """Create a test ImageVariant."""
    return ImageVariant(architecture=architecture, os=os, variant=variant, digest=digest, size=size, **extra)


def make_record(name: str = "3.11", images: list[ImageVariant] | None = None, **extra: Any) -> TagRecord:
    """Create a test TagRecord."""
    return TagRecord(name=name, images=images if images is not None else [make_variant()], **extra)


def make_page(results: list[TagRecord] | None = None, next: str | None = None) -> dict[str, Any]:
    """Create a raw tags page as Docker Hub returns it."""
    return {
        "count": len(results or []),
        "next": next,
        "previous": None,
        "results": [r.model_dump(mode="json") for r in results or []],
    }


class FakePageSource:
    """In-memory page source returning canned payloads and recording requested pages."""

    def __init__(self, *pages: dict[str, Any] | str | Exception):
        self.pages = list(pages)
        self.requested: list[int] = []

    async def fetch_page(self, reference: ImageReference, tag: str, page: int) -> bytes:
        self.requested.append(page)
        payload = self.pages[page - 1]
        if isinstance(payload, Exception):
            raise payload
        if isinstance(payload, str):
            return payload.encode()
        return json.dumps(payload).encode()


# =============================================================================
# FakeResponse - HTTP-like response configuration
# =============================================================================


@dataclass
class FakeResponse:
    """HTTP-like response for fake server.

    Attributes:
        http_status: HTTP status code
        body: Response body (BaseModel, list, dict, str, or None)
        headers: Response headers as tuple of (name, value) pairs
    """

    http_status: HTTPStatus = HTTPStatus.OK
    body: BaseModel | list | dict | str | None = None
    headers: tuple[tuple[str, str], ...] = ()


# Keys look like "GET /v2/repositories/library/python/tags?page=1&name=3.11",
# a key without a query part matches any query.
FakeResponses = dict[str, FakeResponse]


# =============================================================================
# RouteMatcher - Match URL patterns with path parameters
# =============================================================================


class RouteMatcher:
    """Match request URIs against fake_responses patterns.

    Converts patterns like "GET /v2/repositories/{namespace}/{repository}/tags" to regex that matches
    "GET /v2/repositories/library/python/tags".
    """

    _PARAM_PATTERN = re.compile(r"\{([^}]+)\}")

    def __init__(self, responses: FakeResponses):
        self._responses = responses
        self._compiled: list[tuple[re.Pattern[str], str]] = []
        self._compile_patterns()

    def _compile_patterns(self) -> None:
        for pattern in self._responses:
            regex = re.compile(f"^{re.escape(pattern.split()[0])} {self._path_to_regex(pattern)}$")
            self._compiled.append((regex, pattern))

    def _path_to_regex(self, pattern: str) -> str:
        parts = pattern.split(" ", 1)
        path = parts[1] if len(parts) > 1 else parts[0]
        result = ""
        last_end = 0
        for match in self._PARAM_PATTERN.finditer(path):
            result += re.escape(path[last_end : match.start()])
            result += "([^/?]+)"
            last_end = match.end()
        result += re.escape(path[last_end:])
        return result

    def match(self, method: str, path: str, query: str = "") -> FakeResponse | None:
        """Match a request to a fake response, preferring entries that pin the query string."""
        candidates = [f"{method} {path}?{query}", f"{method} {path}"] if query else [f"{method} {path}"]

        for uri in candidates:
            if uri in self._responses:
                return self._responses[uri]

        for uri in candidates:
            for regex, pattern in self._compiled:
                if regex.match(uri):
                    return self._responses[pattern]

        return None


# =============================================================================
# Fixtures - Real HTTP fake server
# =============================================================================


@pytest.fixture
def fake_server_socket() -> socket.socket:
    """Create a bound socket for the fake server."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind(("127.0.0.1", 0))
    return sock


@pytest.fixture
def fake_server_port(fake_server_socket: socket.socket) -> int:
    _, port = fake_server_socket.getsockname()
    return port


@pytest.fixture
def fake_server_url(fake_server_port: int) -> str:
    return f"http://127.0.0.1:{fake_server_port}"


def _serialize_body(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, BaseModel):
        return body.model_dump_json()
    if isinstance(body, (list, dict)):
        return json.dumps(body)
    return str(body)


@pytest.fixture
def fake_requests() -> list[str]:
    """Requests received by the fake server as "METHOD /path?query"."""
    return []


@pytest.fixture
async def http_fake_server(
    fake_responses: FakeResponses,
    fake_requests: list[str],
    fake_server_socket: socket.socket,
) -> AsyncIterator[None]:
    """Real HTTP server returning configured fake responses.

    Uses pre-bound socket so server is ready immediately after task starts.
    """
    matcher = RouteMatcher(fake_responses)

    async def handle_request(request: Request) -> Response:
        method = request.method
        path = request.url.path
        query = request.url.query
        fake_requests.append(f"{method} {path}?{query}" if query else f"{method} {path}")

        fake_response = matcher.match(method, path, query)
        if fake_response is None:
            return Response(
                content=json.dumps({"message": f"No fake response for {method} {path}?{query}"}),
                status_code=404,
                media_type="application/json",
            )

        headers = dict(fake_response.headers)
        if "content-type" not in {k.lower() for k in headers}:
            headers["Content-Type"] = "application/json"

        return Response(
            content=_serialize_body(fake_response.body),
            status_code=fake_response.http_status.value,
            headers=headers,
        )

    app = Starlette(
        routes=[Route("/{path:path}", endpoint=handle_request, methods=["GET", "HEAD"])],
    )

    config = uvicorn.Config(app, log_level="error")
    server = uvicorn.Server(config)
    server_task = asyncio.create_task(server.serve(sockets=[fake_server_socket]))

    yield

    server.should_exit = True
    await server_task


@pytest.fixture
async def hub_client(http_fake_server: None, fake_server_url: str) -> AsyncIterator[HubClient]:
    """Real HubClient pointing to the fake HTTP server."""
    async with HubClient(base_url=fake_server_url, timeout=5.0) as client:
        CLIENT.set(client)
        yield client


@pytest.fixture
def fake_responses() -> FakeResponses:
    """Default empty fake responses, every request gets a 404."""
    return {}
