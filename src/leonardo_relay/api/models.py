"""Pydantic request and response models for the relay API.

These models define the JSON schema for every API endpoint.  FastAPI uses
them for request parsing and OpenAPI documentation generation.

Models
------
GenerateRequest
    Payload for ``POST /generate``.  Every field is optional at the schema
    level: presence of ``prompt``/``width``/``height`` is checked by the
    translator so that a missing field produces a 400 naming the field
    rather than a framework validation error.
GenerateResponse
    Body of a ``202`` reply from ``POST /generate``.
ResultResponse
    Body of a ``200`` reply from ``GET /result/{id}``.
ErrorResponse
    Body of every error reply.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GenerateRequest(BaseModel):
    """Request body for the ``POST /generate`` endpoint.

    Attributes:
        prompt: Text prompt forwarded to the vendor.  Required.
        width: Image width in pixels.  Numeric strings and fractional
            values are truncated to integers.  Required.
        height: Image height in pixels, coerced like ``width``.
            Required.
        enhance_prompt: Whether the vendor should rewrite the prompt.  Sent
            as ``enhancePrompt`` by clients; ``None`` means the default
            (``True``).
    """

    model_config = ConfigDict(populate_by_name=True)

    prompt: str | None = Field(
        default=None,
        description="Text prompt (required).",
    )
    width: int | None = Field(
        default=None,
        description="Image width in pixels (required).",
    )
    height: int | None = Field(
        default=None,
        description="Image height in pixels (required).",
    )
    enhance_prompt: bool | None = Field(
        default=None,
        alias="enhancePrompt",
        description="Prompt-enhancement flag; defaults to true.",
    )

    @field_validator("width", "height", mode="before")
    @classmethod
    def _truncate_dimension(cls, value: Any) -> Any:
        """Coerce fractional sizes (``512.7``, ``"512.7"``) down to integers.

        Anything that is not a finite number is left for the ``int`` field
        validation to reject.
        """
        if isinstance(value, bool) or not isinstance(value, (float, str)):
            return value
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            return value


class GenerateResponse(BaseModel):
    """Response body for an accepted generation job."""

    model_config = ConfigDict(populate_by_name=True)

    generation_id: str = Field(
        ...,
        alias="generationId",
        description="Vendor job identifier used for polling.",
    )


class ResultResponse(BaseModel):
    """Response body for a successful poll.

    ``url`` and ``all_urls`` are only present once the job is ``COMPLETE``.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(..., description="PENDING, PROCESSING or COMPLETE.")
    url: str | None = Field(default=None, description="Primary image URL.")
    all_urls: list[str] | None = Field(
        default=None,
        alias="allUrls",
        description="Every valid image URL in vendor order.",
    )


class ErrorResponse(BaseModel):
    """Body of every error reply."""

    status: str | None = None
    error: str
    details: Any = None
