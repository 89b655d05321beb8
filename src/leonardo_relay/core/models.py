"""Domain types shared by the translator, client and normalizer."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class GenerationStatus(str, Enum):
    """Normalized status of a vendor generation job."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ImageResult:
    """Validated image URLs of a completed job.

    ``url`` is always the first entry of ``all_urls``; every entry starts
    with ``http``.
    """

    url: str
    all_urls: tuple[str, ...]

    @classmethod
    def from_urls(cls, urls: list[str]) -> "ImageResult":
        if not urls:
            raise ValueError("ImageResult requires at least one URL")
        return cls(url=urls[0], all_urls=tuple(urls))

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": GenerationStatus.COMPLETE.value,
            "url": self.url,
            "allUrls": list(self.all_urls),
        }


@dataclass(frozen=True)
class NormalizedResult:
    """Outcome of normalizing one vendor status response."""

    status: GenerationStatus
    images: ImageResult | None = None
    failure_reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Client-facing body; non-terminal statuses carry no ``url`` key."""
        if self.images is not None:
            return self.images.to_dict()
        return {"status": self.status.value}


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a job submission.

    Normally only ``generation_id`` is set.  When the vendor finishes the job
    synchronously and returns images instead of a job handle, only
    ``images`` is set.
    """

    generation_id: str | None = None
    images: ImageResult | None = None
