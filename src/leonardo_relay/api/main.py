"""Leonardo Relay — FastAPI Application.

This module defines the application factory, the REST routes, and the
``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The relay is stateless:

- **Configuration** is a :class:`~leonardo_relay.core.config.RelayConfig`
  built once by the launcher and passed to :func:`create_app`.  It lives on
  ``app.state.config``; there is no module-level configuration.
- **Vendor calls** go through one :class:`~leonardo_relay.core.client.LeonardoClient`
  whose ``httpx.AsyncClient`` is opened and closed by the lifespan handler.
- **Job state** is owned by the vendor.  Every poll performs a fresh vendor
  call; nothing is cached.
- **Errors** are :class:`~leonardo_relay.core.errors.RelayError` subclasses
  converted to JSON by a single exception handler.

Endpoints
---------
========  ====================  ==========================================
Method    Path                  Purpose
========  ====================  ==========================================
POST      ``/generate``         Start a generation job (202 + generationId)
GET       ``/result/{id}``      Poll a job for its normalized status
GET       ``/health``           Liveness probe
========  ====================  ==========================================

Usage
-----
CLI (installed entry point)::

    leonardo-relay

Direct invocation::

    python -m leonardo_relay.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from leonardo_relay import __version__
from leonardo_relay.api.models import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    ResultResponse,
)
from leonardo_relay.core.client import LeonardoClient, build_http_client
from leonardo_relay.core.config import RelayConfig
from leonardo_relay.core.errors import GenerationFailed, RelayError
from leonardo_relay.core.models import GenerationStatus
from leonardo_relay.core.normalizer import normalize
from leonardo_relay.core.translator import build_generation_payload

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "Missing or invalid parameters"},
    404: {"model": ErrorResponse, "description": "No usable result for the job"},
    500: {"model": ErrorResponse, "description": "Vendor or generation failure"},
}


# ---------------------------------------------------------------------------
# Dependencies.
# ---------------------------------------------------------------------------


def get_config(request: Request) -> RelayConfig:
    return request.app.state.config


def get_client(request: Request) -> LeonardoClient:
    return request.app.state.leonardo_client


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.post(
    "/generate",
    status_code=202,
    response_model=GenerateResponse,
    responses={200: {"model": ResultResponse}, **ERROR_RESPONSES},
)
async def generate(
    req: GenerateRequest,
    config: RelayConfig = Depends(get_config),
    client: LeonardoClient = Depends(get_client),
):
    """Start a generation job at the vendor.

    Args:
        req: Client request body.

    Returns:
        ``202 {"generationId": ...}`` for an accepted job.  If the vendor
        finished the job synchronously, ``200`` with the same body as a
        completed poll.

    Raises:
        MissingParameter: 400 when ``prompt``, ``width`` or ``height`` is
            missing.
        VendorError: Vendor status (default 500) on vendor failure.
        UnexpectedResponseShape: 500 when the vendor reply has no job handle.
    """
    payload = build_generation_payload(config, **req.model_dump())
    submission = await client.create_generation(payload)

    if submission.generation_id is None:
        return JSONResponse(status_code=200, content=submission.images.to_dict())
    return {"generationId": submission.generation_id}


@router.get(
    "/result/{generation_id}",
    response_model=ResultResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def get_result(
    generation_id: str,
    client: LeonardoClient = Depends(get_client),
) -> dict:
    """Poll a generation job and return its normalized status.

    Args:
        generation_id: Vendor job identifier returned by ``POST /generate``.

    Returns:
        ``{"status": "PENDING" | "PROCESSING"}`` while the job runs, or
        ``{"status": "COMPLETE", "url": ..., "allUrls": [...]}`` once done.

    Raises:
        GenerationFailed: 500 with the vendor's failure reason.
        IncompleteResult: 404 when the job completed without a valid URL.
        UnexpectedResponseShape: 404 when the vendor body is unrecognised.
        VendorError: Vendor status on vendor failure.
    """
    data = await client.get_generation(generation_id)
    result = normalize(data)

    if result.status is GenerationStatus.FAILED:
        logger.info("Generation %s failed: %s", generation_id, result.failure_reason)
        raise GenerationFailed(details=result.failure_reason)
    return result.to_dict()


@router.get("/health")
async def health() -> dict:
    """Liveness probe; does not contact the vendor."""
    return {"status": "ok", "version": __version__}


# ---------------------------------------------------------------------------
# Exception handlers.
# ---------------------------------------------------------------------------


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies are client errors like missing fields, not 422s.
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": details},
    )


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    config: RelayConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the relay application.

    Args:
        config: Relay configuration.  ``None`` loads it from the environment.
        transport: Optional ``httpx`` transport for vendor calls, used by
            tests to stub the vendor.

    Returns:
        A configured :class:`FastAPI` instance.
    """
    if config is None:
        config = RelayConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the vendor HTTP client on startup and close it on shutdown."""
        if not config.api_key:
            logger.warning("No vendor API key configured; vendor calls will be unauthenticated.")
        http = build_http_client(config, transport=transport)
        app.state.leonardo_client = LeonardoClient(config, http)
        logger.info("Vendor client ready for %s", config.base_url)

        yield

        await http.aclose()
        logger.info("Vendor client closed on shutdown.")

    app = FastAPI(
        title="Leonardo Relay",
        description="Relay for starting and polling vendor image-generation jobs.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.include_router(router)
    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    return app


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :class:`RelayConfig` (for example
    ``LEONARDO_RELAY_SERVER_PORT`` or ``PORT``).  Defaults to
    ``0.0.0.0:3000``.

    This function is registered as the ``leonardo-relay`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    config = RelayConfig()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(config),
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level,
    )


if __name__ == "__main__":
    main()
