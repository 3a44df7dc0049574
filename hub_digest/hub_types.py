from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ImageVariant(BaseModel):
    """One OS/architecture build published under a tag.

    Unknown fields are kept as-is so the full record can be handed back to the caller.
    """

    model_config = ConfigDict(extra="allow")

    os: str | None = None
    architecture: str | None = None
    variant: str | None = None
    digest: str | None = None
    size: int | None = None

    @property
    def platform(self) -> str:
        """Architecture used for matching, e.g. "amd64" or "arm/v7"."""
        if self.variant:
            return f"{self.architecture}/{self.variant}"
        return self.architecture or ""


class TagRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    images: list[ImageVariant] = Field(default_factory=list)

    @field_validator("images", mode="before")
    @classmethod
    def _null_images(cls, value: Any) -> Any:
        return [] if value is None else value


class TagPage(BaseModel):
    """Single page of ``/v2/repositories/{namespace}/{repository}/tags``."""

    model_config = ConfigDict(extra="allow")

    count: int | None = None
    next: Any = None
    previous: Any = None
    results: list[TagRecord] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def _null_results(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def has_next(self) -> bool:
        return isinstance(self.next, str) and bool(self.next)
