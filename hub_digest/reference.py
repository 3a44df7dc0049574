from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidFormat

DEFAULT_NAMESPACE = "library"
DEFAULT_TAG = "latest"


@dataclass(frozen=True)
class ImageReference:
    """Docker Hub image split into its namespace, repository and tag."""

    namespace: str
    repository: str
    tag: str = DEFAULT_TAG

    def __str__(self) -> str:
        return f"{self.namespace}/{self.repository}:{self.tag}"


def parse_image(image: str) -> ImageReference:
    """Parse ``author/image:tag`` into an ImageReference.

    Examples:
    - "python" -> library/python:latest
    - "python:3.11-slim" -> library/python:3.11-slim
    - "bitnami/redis:7.2" -> bitnami/redis:7.2

    A repository part with more than one ":" keeps its raw value and gets the default tag.
    """
    if not image:
        raise InvalidFormat("No image specified")

    chunks = image.split("/")
    if len(chunks) == 1:
        namespace, repository = DEFAULT_NAMESPACE, chunks[0]
    elif len(chunks) == 2:
        namespace, repository = chunks
    else:
        raise InvalidFormat(f"Invalid image format: {image!r}")

    tag = DEFAULT_TAG
    parts = repository.split(":")
    if len(parts) == 2:
        repository, tag = parts

    return ImageReference(namespace=namespace, repository=repository, tag=tag)
