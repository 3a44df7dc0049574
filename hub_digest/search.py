"""Paginated search for the image variant matching a requested platform."""

import logging
from dataclasses import dataclass
from typing import Any, Union

from pydantic import ValidationError

from .client import PageSource
from .errors import ConfigurationError, HubError, ParseError, TagNotFound
from .hub_types import ImageVariant, TagPage, TagRecord
from .reference import ImageReference, parse_image

log = logging.getLogger(__name__)

DEFAULT_OS = "linux"
DEFAULT_ARCHITECTURE = "amd64"
DEFAULT_PAGE_LIMIT = 50


@dataclass(frozen=True)
class SearchRequest:
    reference: ImageReference
    os: str = DEFAULT_OS
    architecture: str = DEFAULT_ARCHITECTURE
    page_limit: int = DEFAULT_PAGE_LIMIT

    def __post_init__(self) -> None:
        if not self.os:
            raise ConfigurationError("Input variable 'os' must not be empty")
        if not self.architecture:
            raise ConfigurationError("Input variable 'architecture' must not be empty")
        if isinstance(self.page_limit, bool) or not isinstance(self.page_limit, int):
            raise ConfigurationError(f"Page limit must be an integer, got {self.page_limit!r}")
        if self.page_limit <= 0:
            raise ConfigurationError(f"Page limit must be positive, got {self.page_limit}")

    @property
    def tag(self) -> str:
        return self.reference.tag


@dataclass(frozen=True)
class Found:
    tag_record: TagRecord
    image: ImageVariant
    page: int

    @property
    def digest(self) -> str | None:
        return self.image.digest

    @property
    def size(self) -> int | None:
        return self.image.size

    @property
    def message(self) -> str:
        return f"Found {self.digest} ({self.size} bytes) on page {self.page}"

    def outputs(self) -> dict[str, Any]:
        return {
            "digest": self.digest,
            "size": self.size,
            "tagMetadata": self.tag_record.model_dump(mode="json", exclude_unset=True),
            "finalImageMetadata": self.image.model_dump(mode="json", exclude_unset=True),
        }

    def unwrap(self) -> "Found":
        return self


@dataclass(frozen=True)
class KeepPaging:
    pass


@dataclass(frozen=True)
class Exhausted:
    pass


PageOutcome = Union[Found, KeepPaging, Exhausted]


@dataclass(frozen=True)
class NotFound:
    request: SearchRequest
    pages: int
    limit_reached: bool = False

    @property
    def message(self) -> str:
        reason = "page limit reached" if self.limit_reached else "no more pages"
        return (
            f"Image-Tag not found! No {self.request.os}/{self.request.architecture} image "
            f"for {self.request.reference} in {self.pages} page(s), {reason}"
        )

    def unwrap(self) -> Found:
        raise TagNotFound(self.message)


@dataclass(frozen=True)
class Failure:
    error: HubError
    page: int

    @property
    def message(self) -> str:
        return self.error.message

    def unwrap(self) -> Found:
        raise self.error


SearchResult = Union[Found, NotFound, Failure]


def scan_page(page: TagPage, request: SearchRequest, page_number: int = 1) -> PageOutcome:
    """
    Look for the requested platform in a single page.

    Records are scanned in page order and images in array order, the first match wins.
    Without a match the page's ``next`` link decides whether paging continues.
    """
    for record in page.results:
        if record.name != request.tag:
            continue

        for image in record.images:
            if image.platform != request.architecture or image.os != request.os:
                log.debug("Skipping %s %s/%s", record.name, image.os, image.platform)
                continue
            return Found(tag_record=record, image=image, page=page_number)

    if page.has_next:
        return KeepPaging()
    return Exhausted()


def parse_page(payload: bytes | str) -> TagPage:
    try:
        return TagPage.model_validate_json(payload)
    except ValidationError as e:
        raise ParseError(f"Invalid tags page: {e}") from e


async def search(request: SearchRequest, source: PageSource) -> SearchResult:
    page = 1
    while True:
        try:
            tag_page = parse_page(await source.fetch_page(request.reference, request.tag, page))
        except HubError as e:
            log.info("Search failed on page %d: %s", page, e.message)
            return Failure(error=e, page=page)

        outcome = scan_page(tag_page, request, page)
        if isinstance(outcome, Found):
            log.info("Target image found on page %d: %s", page, outcome.digest)
            return outcome
        if isinstance(outcome, Exhausted):
            return NotFound(request=request, pages=page)
        # The ceiling is checked before the next page is requested
        if page + 1 > request.page_limit:
            return NotFound(request=request, pages=page, limit_reached=True)
        page += 1


def build_request(
    image: str,
    os: str = DEFAULT_OS,
    architecture: str = DEFAULT_ARCHITECTURE,
    page_limit: int = DEFAULT_PAGE_LIMIT,
) -> SearchRequest:
    """Build a SearchRequest from raw inputs, blank optional values fall back to defaults."""
    image = (image or "").strip()
    if not image:
        raise ConfigurationError("Input variable 'image' not specified!")

    return SearchRequest(
        reference=parse_image(image),
        os=(os or "").strip() or DEFAULT_OS,
        architecture=(architecture or "").strip() or DEFAULT_ARCHITECTURE,
        page_limit=page_limit,
    )
