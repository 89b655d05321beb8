"""Normalize vendor status responses.

The vendor's ``GET /generations/{id}`` body has been observed in several
layouts.  Each layout is handled by one parser strategy; strategies are tried
in order and each returns either a :class:`NormalizedResult` or ``None`` for
"not my shape".  When no strategy matches, the response is rejected with
:class:`UnexpectedResponseShape`.

Strategies
----------
1. ``generations_by_pk`` container carrying a ``status`` field (the
   documented layout).
2. ``status`` at the top level, images beside it.
3. Fallback scan for an image array (top level or inside the container)
   with no recognisable status, treated as complete.

Status semantics
----------------
- ``PENDING`` / ``PROCESSING`` pass through without URLs.
- ``COMPLETE`` requires at least one image URL starting with ``http``;
  otherwise :class:`IncompleteResult` (``COMPLETE_NO_VALID_URLS``) is raised.
  Completion without usable output is never reported as success.
- ``FAILED`` carries the vendor's reason, or ``"Unknown reason"``.
- Any other status makes the strategy decline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from leonardo_relay.core.errors import IncompleteResult, UnexpectedResponseShape
from leonardo_relay.core.models import GenerationStatus, ImageResult, NormalizedResult

logger = logging.getLogger(__name__)

CONTAINER_KEY = "generations_by_pk"
IMAGE_KEYS = ("generated_images", "images")
FAILURE_REASON_KEYS = ("failureReason", "failure_reason", "error")
UNKNOWN_REASON = "Unknown reason"

ParseStrategy = Callable[[Mapping[str, Any]], "NormalizedResult | None"]


def is_valid_url(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("http")


def extract_image_urls(images: Any) -> list[str]:
    """Return the valid URLs of an image array, preserving order.

    Entries may be objects with a ``url`` field or bare URL strings.  Null
    entries, non-strings and anything not starting with ``http`` are dropped.
    """
    if not isinstance(images, list):
        return []
    urls: list[str] = []
    for item in images:
        url = item.get("url") if isinstance(item, Mapping) else item
        if is_valid_url(url):
            urls.append(url)
    return urls


def scan_nested_image_urls(data: Any) -> list[str]:
    """Collect image URLs from every array-of-arrays nested in *data*.

    Used when a job submission returns finished images instead of a job
    handle.
    """
    urls: list[str] = []
    if isinstance(data, Mapping):
        for value in data.values():
            urls.extend(scan_nested_image_urls(value))
    elif isinstance(data, list):
        for item in data:
            if isinstance(item, list):
                urls.extend(extract_image_urls(item))
            elif isinstance(item, Mapping):
                urls.extend(scan_nested_image_urls(item))
    return urls


def _find_images(container: Mapping[str, Any]) -> Any:
    for key in IMAGE_KEYS:
        if key in container:
            return container[key]
    return None


def _failure_reason(container: Mapping[str, Any]) -> str:
    for key in FAILURE_REASON_KEYS:
        reason = container.get(key)
        if reason:
            return str(reason)
    return UNKNOWN_REASON


def _interpret(status_value: Any, container: Mapping[str, Any]) -> NormalizedResult | None:
    """Apply the status semantics to one status container."""
    try:
        status = GenerationStatus(status_value)
    except ValueError:
        logger.warning("Unrecognised vendor status %r", status_value)
        return None

    if status in (GenerationStatus.PENDING, GenerationStatus.PROCESSING):
        return NormalizedResult(status=status)

    if status is GenerationStatus.COMPLETE:
        images = _find_images(container)
        urls = extract_image_urls(images)
        if not urls:
            raise IncompleteResult(
                details={
                    "status": status.value,
                    "images": images if isinstance(images, list) else [],
                }
            )
        return NormalizedResult(status=status, images=ImageResult.from_urls(urls))

    if status is GenerationStatus.FAILED:
        return NormalizedResult(status=status, failure_reason=_failure_reason(container))

    # UNKNOWN reported by the vendor itself is no better than no status.
    return None


def parse_container_status(data: Mapping[str, Any]) -> NormalizedResult | None:
    container = data.get(CONTAINER_KEY)
    if not isinstance(container, Mapping) or "status" not in container:
        return None
    return _interpret(container["status"], container)


def parse_top_level_status(data: Mapping[str, Any]) -> NormalizedResult | None:
    if "status" not in data:
        return None
    return _interpret(data["status"], data)


def parse_image_array(data: Mapping[str, Any]) -> NormalizedResult | None:
    candidates = [data]
    container = data.get(CONTAINER_KEY)
    if isinstance(container, Mapping):
        candidates.append(container)
    for candidate in candidates:
        urls = extract_image_urls(_find_images(candidate))
        if urls:
            return NormalizedResult(
                status=GenerationStatus.COMPLETE,
                images=ImageResult.from_urls(urls),
            )
    return None


STRATEGIES: tuple[ParseStrategy, ...] = (
    parse_container_status,
    parse_top_level_status,
    parse_image_array,
)


def normalize(
    data: Any,
    strategies: tuple[ParseStrategy, ...] = STRATEGIES,
) -> NormalizedResult:
    """Reduce a vendor status response to a :class:`NormalizedResult`.

    Args:
        data: Decoded JSON body of the vendor status call.
        strategies: Parser strategies, tried in order.

    Returns:
        The first strategy result that is not ``None``.

    Raises:
        IncompleteResult: Vendor said ``COMPLETE`` but no URL is usable.
        UnexpectedResponseShape: No strategy recognised the body (status
            ``UNKNOWN``, HTTP 404).
    """
    if isinstance(data, Mapping):
        for strategy in strategies:
            result = strategy(data)
            if result is not None:
                return result

    logger.warning("Vendor status response matched no known shape")
    raise UnexpectedResponseShape(
        details={"status": GenerationStatus.UNKNOWN.value, "response": data},
        status_code=404,
    )
