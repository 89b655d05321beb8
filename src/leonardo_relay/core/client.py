"""Async HTTP client for the vendor generations API.

Processing flow:
    1. ``create_generation`` posts a job payload to ``/generations`` and
       returns the job handle (or, rarely, synchronously finished images).
    2. ``get_generation`` fetches ``/generations/{id}`` and returns the raw
       JSON body for :func:`~leonardo_relay.core.normalizer.normalize`.

Error handling strategy:
    - Non-2xx vendor replies raise :class:`VendorError` carrying the vendor's
      status code and raw body.
    - Transport failures raise :class:`VendorError` with status 500.
    - A 2xx body without a job handle raises :class:`UnexpectedResponseShape`.
    - Nothing is retried.

The underlying ``httpx.AsyncClient`` is injected so the application can share
one connection pool and tests can mount an ``httpx.MockTransport``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from leonardo_relay.core.config import RelayConfig
from leonardo_relay.core.errors import InvalidParameter, UnexpectedResponseShape, VendorError
from leonardo_relay.core.models import ImageResult, SubmissionResult
from leonardo_relay.core.normalizer import scan_nested_image_urls

logger = logging.getLogger(__name__)


def build_http_client(
    config: RelayConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the shared ``httpx.AsyncClient`` for vendor calls.

    Args:
        config: Relay configuration (credential, base URL, timeout).
        transport: Optional transport override, used by tests.

    Returns:
        A client with the bearer credential and JSON headers preset.
    """
    headers = {
        "accept": "application/json",
        "content-type": "application/json",
    }
    if config.api_key:
        headers["authorization"] = f"Bearer {config.api_key}"
    return httpx.AsyncClient(
        headers=headers,
        timeout=config.request_timeout,
        transport=transport,
    )


def extract_generation_id(data: Any) -> str | None:
    """Return ``sdGenerationJob.generationId`` from a submission body."""
    if not isinstance(data, Mapping):
        return None
    job = data.get("sdGenerationJob")
    if not isinstance(job, Mapping):
        return None
    generation_id = job.get("generationId")
    return str(generation_id) if generation_id else None


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class LeonardoClient:
    """Thin wrapper around the vendor's generations endpoints.

    Args:
        config: Relay configuration.
        http: Shared async HTTP client, see :func:`build_http_client`.
    """

    def __init__(self, config: RelayConfig, http: httpx.AsyncClient):
        self.config = config
        self.http = http

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Vendor %s %s failed: %s", method, url, exc)
            raise VendorError(details=str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            body = _response_body(response)
            logger.warning(
                "Vendor %s %s returned HTTP %d", method, url, response.status_code
            )
            raise VendorError(details=body, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise UnexpectedResponseShape(details=response.text) from exc

    async def create_generation(self, payload: dict[str, Any]) -> SubmissionResult:
        """Submit a generation job.

        Args:
            payload: Vendor payload from
                :func:`~leonardo_relay.core.translator.build_generation_payload`.

        Returns:
            A :class:`SubmissionResult` holding the generation id, or the
            finished images when the vendor completed the job synchronously.

        Raises:
            VendorError: Non-2xx reply or transport failure.
            UnexpectedResponseShape: 2xx reply with neither a generation id
                nor any image URL.
        """
        data = await self._request("POST", self.config.generations_url, json=payload)

        generation_id = extract_generation_id(data)
        if generation_id:
            logger.info("Vendor accepted generation %s", generation_id)
            return SubmissionResult(generation_id=generation_id)

        urls = scan_nested_image_urls(data)
        if urls:
            logger.info("Vendor returned %d image(s) synchronously", len(urls))
            return SubmissionResult(images=ImageResult.from_urls(urls))

        logger.warning("Vendor submission reply has no generation id")
        raise UnexpectedResponseShape(details=data)

    async def get_generation(self, generation_id: str) -> Any:
        """Fetch the raw status body of a generation job.

        Raises:
            InvalidParameter: Empty id or one made only of dots, which would
                resolve to a different vendor path.
            VendorError: Non-2xx reply or transport failure.
            UnexpectedResponseShape: 2xx reply that is not JSON (404).
        """
        if not generation_id.strip("."):
            raise InvalidParameter(f"Invalid generation id: {generation_id!r}")
        url = f"{self.config.generations_url}/{quote(generation_id, safe='')}"
        try:
            return await self._request("GET", url)
        except UnexpectedResponseShape as exc:
            exc.status_code = 404
            raise
