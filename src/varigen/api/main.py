"""Illustration Variation Generator: FastAPI Application.

This module is the single entry point for the web application. It defines
the FastAPI ``app`` instance, the REST API routes, and the ``main()`` CLI
function that mounts the Gradio UI and launches the uvicorn server.

Architecture
------------
- **Configuration** comes from :data:`~varigen.core.config.config`. The API
  key is checked once at startup; a missing key stops the process before it
  serves anything.
- **Generation** is delegated to the process-wide
  :class:`~varigen.core.orchestrator.VariationOrchestrator`, shared with the
  Gradio UI and stored on ``app.state.orchestrator`` during the lifespan.
- **Nothing is persisted.** Results are returned inline as data URLs.
- **Errors** are mapped by exception handlers: validation errors become 400,
  upstream failures become 502. The body is always ``{"detail": message}``.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/api/config``               Model name and upload limits
POST      ``/api/variations``           Generate one variation per prompt
GET       ``/``                         Gradio UI (mounted by ``main()``)
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    varigen

Direct invocation::

    python -m varigen.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import gradio as gr
from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from varigen import __version__
from varigen.api.models import ConfigResponse, VariationResult, VariationsResponse
from varigen.core.config import config
from varigen.core.errors import UpstreamError, ValidationError
from varigen.core.models import ImageBlob
from varigen.core.orchestrator import VariationOrchestrator
from varigen.ui import create_ui
from varigen.ui.state import get_orchestrator
from varigen.ui.validation import validate_upload

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Application lifecycle: edit client setup.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Resolves the process-wide orchestrator (creating the edit client from
        configuration) and stores it on ``app.state``. A missing API key
        raises :class:`~varigen.core.errors.ConfigError` here, so the app
        never starts serving without a credential.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    app.state.orchestrator = get_orchestrator()
    logger.info(f"Orchestrator ready (model: {config.model_name}).")

    yield  # Application runs here.

    logger.info("Variation API shutting down.")


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Illustration Variation Generator",
    description="Generate AI variations of an uploaded image, one per edit prompt.",
    version=__version__,
    lifespan=lifespan,
)

# Allow cross-origin requests so a separately served frontend can call the
# API during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error mapping.
# ---------------------------------------------------------------------------


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Map user input errors to HTTP 400."""
    logger.warning(f"Validation error on {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """Map failures of the generative API to HTTP 502."""
    logger.warning(f"Upstream error on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Upload helper.
# ---------------------------------------------------------------------------


async def _read_upload(image: UploadFile | None) -> ImageBlob | None:
    """Turn a multipart upload into an ImageBlob, validating it.

    Returns None when no file was sent, leaving the "missing image" message
    to the orchestrator's own validation.

    Raises:
        ValidationError: If the upload is unreadable, too large, or of an
            unsupported type
    """
    if image is None or not image.filename:
        return None

    try:
        data = await image.read()
    except OSError as e:
        raise ValidationError(f"Could not read the uploaded image: {e}") from e

    blob = ImageBlob(data=data, mime_type=image.content_type or "", filename=image.filename)
    validate_upload(blob, config)
    return blob


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/api/config", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Return the limits and model information the frontend needs.

    Returns:
        :class:`ConfigResponse` with version, model name, upload ceiling,
        accepted MIME types, and the maximum number of prompts.
    """
    return ConfigResponse(
        version=__version__,
        model_name=config.model_name,
        max_upload_bytes=config.max_upload_bytes,
        allowed_mime_types=config.allowed_mime_types,
        max_prompts=config.max_prompts,
    )


@app.post("/api/variations", response_model=VariationsResponse)
async def create_variations(
    request: Request,
    image: UploadFile | None = File(default=None),
    prompts: list[str] = Form(default=[]),
) -> VariationsResponse:
    """Generate one variation of the uploaded image per non-blank prompt.

    This endpoint:

    1. Validates the upload (size ceiling, MIME whitelist).
    2. Lets the orchestrator reject a missing image or an all-blank prompt
       list: both before any upstream call.
    3. Runs every edit concurrently and waits for all of them.
    4. Returns the results in prompt order, or the first failure.

    Args:
        request: Incoming request (used to reach ``app.state``).
        image: Uploaded image file (PNG, JPEG or WEBP).
        prompts: Edit prompts; repeat the form field once per prompt.

    Returns:
        :class:`VariationsResponse` with one result per non-blank prompt.

    Raises:
        ValidationError: Mapped to 400.
        UpstreamError: Mapped to 502.
    """
    blob = await _read_upload(image)

    orchestrator: VariationOrchestrator = request.app.state.orchestrator
    results = await orchestrator.generate_variations(blob, prompts)

    return VariationsResponse(
        count=len(results),
        results=[VariationResult.from_result(r) for r in results],
    )


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def configure_logging() -> None:
    """Apply the configured log level and format to the root logger."""
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main() -> None:
    """Validate configuration, mount the Gradio UI and launch uvicorn.

    Reads host and port from :data:`~varigen.core.config.config` (which
    loads from ``VARIGEN_SERVER_HOST`` and ``VARIGEN_SERVER_PORT``
    environment variables). Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``varigen`` console script in
    ``pyproject.toml``.

    Raises:
        ConfigError: If no API key is configured.
    """
    import uvicorn

    configure_logging()
    config.require_api_key()

    logger.info("Starting Illustration Variation Generator...")
    logger.info(f"Configuration: {config.model_dump()}")

    server = gr.mount_gradio_app(app, create_ui(), path="/")

    logger.info(f"Launching on {config.server_host}:{config.server_port}")
    uvicorn.run(
        server,
        host=config.server_host,
        port=config.server_port,
    )


if __name__ == "__main__":
    main()
