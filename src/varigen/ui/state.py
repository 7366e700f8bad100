"""State management utilities for the variation UI.

This module owns the session state transitions: loading an upload, editing
the prompt list, and the run lifecycle. It also wires the process-wide edit
client into an orchestrator.

Run lifecycle
-------------
Starting a run replaces the outcome with ``pending`` immediately, which drops
the previous results before any request is sent; stale results are never on
screen next to a new run. The run then ends with a wholesale replacement by a
``succeeded`` or ``failed`` outcome.
"""

import logging
from pathlib import Path

from varigen.core.client import GeminiEditClient
from varigen.core.config import config
from varigen.core.encoder import guess_mime_type, read_image
from varigen.core.models import GenerationResult, PromptList, RunOutcome
from varigen.core.orchestrator import VariationOrchestrator

from .models import UIState
from .validation import validate_upload, validate_upload_size

logger = logging.getLogger(__name__)

_orchestrator: VariationOrchestrator | None = None


def get_orchestrator() -> VariationOrchestrator:
    """Return the process-wide orchestrator, creating it on first use.

    Raises:
        ConfigError: If no API key is configured
    """
    global _orchestrator
    if _orchestrator is None:
        logger.info("Creating edit client and orchestrator")
        client = GeminiEditClient.from_config(config)
        _orchestrator = VariationOrchestrator(client, result_mime_type=config.result_mime_type)
    return _orchestrator


def set_orchestrator(orchestrator: VariationOrchestrator | None) -> None:
    """Install (or clear, with None) the process-wide orchestrator."""
    global _orchestrator
    _orchestrator = orchestrator


def initialize_ui_state(state: UIState | None = None) -> UIState:
    """Create a UIState if needed and seed the prompt list.

    A fresh session starts with one prompt slot holding the configured
    default prompt.

    Args:
        state: Existing UIState or None

    Returns:
        Initialized UIState instance
    """
    if state is None:
        logger.info("Creating new UIState")
        state = UIState()

    if len(state.prompts) == 0:
        state.prompts = PromptList([config.default_prompt])

    return state


def load_upload(state: UIState, path: str, mime_type: str | None = None) -> UIState:
    """Read and validate an uploaded file, then make it the current image.

    On failure the previous upload is left in place.

    Args:
        state: UI state
        path: Path of the uploaded file
        mime_type: Declared MIME type (defaults to the file extension's type)

    Returns:
        Updated state

    Raises:
        ValidationError: If the file is too large or of an unsupported type
        OSError: If the file cannot be read
    """
    # Check size from the filesystem first so oversized files are never read
    validate_upload_size(Path(path).stat().st_size, config.max_upload_bytes)

    blob = read_image(path, mime_type or guess_mime_type(path))
    validate_upload(blob, config)

    state.image = blob
    state.image_path = path
    logger.info(f"Loaded upload {blob.filename} ({blob.size} bytes, {blob.mime_type})")
    return state


def clear_upload(state: UIState) -> UIState:
    """Forget the current upload."""
    state.image = None
    state.image_path = None
    return state


def begin_run(state: UIState) -> UIState:
    """Mark a run as started, discarding the previous results immediately."""
    state.outcome = RunOutcome.pending()
    return state


def complete_run(state: UIState, results: list[GenerationResult]) -> UIState:
    """Record a successful run."""
    state.outcome = RunOutcome.succeeded(results)
    return state


def fail_run(state: UIState, error: str) -> UIState:
    """Record a failed run; no partial results are kept."""
    state.outcome = RunOutcome.failed(error)
    return state
