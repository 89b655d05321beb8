"""Tests for leonardo_relay.api.models and leonardo_relay.core.models.

Tests cover:
- GenerateRequest defaults, aliases and coercion.
- Response model aliases.
- Domain result serialisation (no ``url`` for non-terminal statuses).
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from leonardo_relay.api.models import GenerateRequest, GenerateResponse, ResultResponse
from leonardo_relay.core.models import (
    GenerationStatus,
    ImageResult,
    NormalizedResult,
    SubmissionResult,
)


class TestGenerateRequest:
    """Test GenerateRequest Pydantic model."""

    def test_valid_request(self):
        req = GenerateRequest(prompt="a cat", width=512, height=512)
        assert req.prompt == "a cat"
        assert req.enhance_prompt is None  # Default applied by the translator.

    def test_all_fields_optional(self):
        """Absence is reported by the translator, not by schema validation."""
        req = GenerateRequest()
        assert req.prompt is None
        assert req.width is None
        assert req.height is None

    def test_enhance_prompt_alias(self):
        req = GenerateRequest.model_validate({"prompt": "x", "enhancePrompt": False})
        assert req.enhance_prompt is False

    def test_numeric_strings_coerced(self):
        req = GenerateRequest.model_validate({"width": "640", "height": "480"})
        assert req.width == 640
        assert req.height == 480

    def test_non_numeric_width_rejected(self):
        with pytest.raises(ValidationError):
            GenerateRequest.model_validate({"width": "wide"})

    @pytest.mark.parametrize("value", [512.7, "512.7", 512.0])
    def test_fractional_dimensions_truncated(self, value):
        req = GenerateRequest.model_validate({"width": value, "height": value})
        assert req.width == 512
        assert req.height == 512


class TestResponseModels:
    """Test response model aliases."""

    def test_generate_response_alias(self):
        resp = GenerateResponse(generationId="abc123")
        assert resp.model_dump(by_alias=True) == {"generationId": "abc123"}

    def test_result_response_excludes_none(self):
        resp = ResultResponse(status="PENDING")
        assert resp.model_dump(by_alias=True, exclude_none=True) == {"status": "PENDING"}


class TestDomainModels:
    """Test core result types."""

    def test_image_result_first_url_is_primary(self):
        result = ImageResult.from_urls(["https://a/1.png", "https://a/2.png"])
        assert result.url == "https://a/1.png"
        assert result.all_urls == ("https://a/1.png", "https://a/2.png")

    def test_image_result_requires_url(self):
        with pytest.raises(ValueError):
            ImageResult.from_urls([])

    def test_pending_has_no_url_key(self):
        body = NormalizedResult(status=GenerationStatus.PENDING).to_dict()
        assert body == {"status": "PENDING"}

    def test_complete_body(self):
        images = ImageResult.from_urls(["https://img/x.png"])
        body = NormalizedResult(status=GenerationStatus.COMPLETE, images=images).to_dict()
        assert body == {
            "status": "COMPLETE",
            "url": "https://img/x.png",
            "allUrls": ["https://img/x.png"],
        }

    def test_submission_defaults(self):
        result = SubmissionResult(generation_id="abc")
        assert result.images is None
