from typing import Any

from pydantic import BaseModel, Field

from hub_digest.context import CLIENT
from hub_digest.search import DEFAULT_ARCHITECTURE, DEFAULT_OS, DEFAULT_PAGE_LIMIT, build_request, search


class FindImageOutput(BaseModel):
    digest: str | None = Field(description="Digest of the matched image variant")
    size: int | None = Field(description="Compressed size of the matched image variant in bytes")
    tag_metadata: dict[str, Any] = Field(description="Full Docker Hub record of the tag")
    final_image_metadata: dict[str, Any] = Field(description="Full Docker Hub record of the image variant")


async def find_image(
    image: str,
    os: str = DEFAULT_OS,
    architecture: str = DEFAULT_ARCHITECTURE,
    page_limit: int = DEFAULT_PAGE_LIMIT,
) -> FindImageOutput:
    """
    Find the digest of a Docker Hub image for one OS and architecture.

    TL;DR:
    - PURPOSE: Pin "python:3.11-slim" to the exact digest for linux/arm64
    - FORMAT: image is "name", "name:tag" or "namespace/name:tag"
    - ARCHITECTURE: "amd64", "arm64" or with a variant, e.g. "arm/v7"

    USAGE:
    - Resolve a tag to a digest before pinning it in a Dockerfile
    - Check whether a tag is published for a given platform

    RETURNS: digest, size, tag_metadata, final_image_metadata
    """
    request = build_request(image, os=os, architecture=architecture, page_limit=page_limit)
    found = (await search(request, CLIENT.get())).unwrap()
    outputs = found.outputs()
    return FindImageOutput(
        digest=outputs["digest"],
        size=outputs["size"],
        tag_metadata=outputs["tagMetadata"],
        final_image_metadata=outputs["finalImageMetadata"],
    )
