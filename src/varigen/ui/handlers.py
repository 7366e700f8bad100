"""Gradio event handlers for the variation UI.

Handlers take raw component values plus the session UIState, delegate to
``state`` and the core orchestrator, and return component updates. They are
the boundary where every exception is reduced to a message string.
"""

import base64
import logging
from io import BytesIO

import gradio as gr
from PIL import Image

from varigen.core.config import config
from varigen.core.errors import ConfigError, ResultDecodeError, UpstreamError, ValidationError
from varigen.core.models import GenerationResult

from .models import GENERATING_MESSAGE, READY_MESSAGE, UIState
from .state import (
    begin_run,
    clear_upload,
    complete_run,
    fail_run,
    get_orchestrator,
    initialize_ui_state,
    load_upload,
)

logger = logging.getLogger(__name__)


def format_error(error: Exception) -> str:
    """Reduce an exception to the markdown shown in the status area."""
    if isinstance(error, ValidationError):
        return f"❌ **Validation Error**\n\n{error}"
    if isinstance(error, UpstreamError):
        return f"❌ **Generation Failed**\n\n{error}"
    if isinstance(error, ResultDecodeError):
        return f"❌ **Display Error**\n\n{error}"
    if isinstance(error, ConfigError):
        return f"❌ **Configuration Error**\n\n{error}"
    if isinstance(error, OSError):
        return f"❌ **Error**\n\nCould not read the uploaded image: {error}"
    return (
        f"❌ **Error**\n\nAn unexpected error occurred. "
        f"Check logs for details.\n\n`{error}`"
    )


def result_to_image(result: GenerationResult) -> Image.Image:
    """Decode a result's base64 payload into a PIL image for the gallery.

    Raises:
        ResultDecodeError: If the payload is not valid base64 or not an image
    """
    try:
        image = Image.open(BytesIO(base64.b64decode(result.image_data)))
        image.load()
    except (OSError, ValueError) as e:
        raise ResultDecodeError(
            f"The image returned for prompt {result.prompt!r} could not be displayed: {e}"
        ) from e
    return image


def results_to_gallery(results) -> list[tuple[Image.Image, str]]:
    """Build gallery items (image, caption) in result order."""
    return [(result_to_image(r), f"Prompt: {r.prompt}") for r in results]


def render_prompt_slots(state: UIState, max_slots: int | None = None) -> list:
    """Build updates that show the prompt list in the fixed slot rows.

    Returns:
        ``max_slots`` row visibility updates, then ``max_slots`` textbox value
        updates, then the "add prompt" button update
    """
    max_slots = max_slots or config.max_prompts
    prompts = list(state.prompts)
    rows = [gr.update(visible=i < len(prompts)) for i in range(max_slots)]
    boxes = [gr.update(value=prompts[i] if i < len(prompts) else "") for i in range(max_slots)]
    add_button = gr.update(interactive=len(prompts) < max_slots)
    return [*rows, *boxes, add_button]


def handle_image_upload(path: str | None, state: UIState) -> tuple:
    """Load a newly uploaded image.

    ``path`` is the file exactly as the user sent it, so the size ceiling and
    the bytes sent upstream both apply to the original file. An invalid upload
    is rejected with a message and the previous image (if any) is restored.

    Args:
        path: Temp path of the uploaded file, or None when cleared
        state: UI state

    Returns:
        Tuple of (upload_update, preview_update, status_message,
        generate_button_update, updated_state)
    """
    state = initialize_ui_state(state)

    if not path:
        state = clear_upload(state)
        return (
            gr.update(value=None),
            gr.update(value=None),
            READY_MESSAGE,
            gr.update(interactive=False),
            state,
        )

    try:
        state = load_upload(state, path)
        status = f"✅ Loaded **{state.image.filename}**"
    except (ValidationError, OSError) as e:
        logger.warning(f"Upload rejected: {e}")
        status = format_error(e)

    return (
        gr.update(value=state.image_path),
        gr.update(value=state.image_path),
        status,
        gr.update(interactive=state.can_generate()),
        state,
    )


def add_prompt(state: UIState, max_slots: int | None = None) -> list:
    """Append a blank prompt, up to the number of slots."""
    state = initialize_ui_state(state)
    max_slots = max_slots or config.max_prompts
    if len(state.prompts) < max_slots:
        state.prompts.add("")
    return [*render_prompt_slots(state, max_slots), state]


def remove_prompt(index: int, state: UIState, max_slots: int | None = None) -> list:
    """Remove the prompt at ``index``; later prompts move up one slot."""
    state = initialize_ui_state(state)
    if 0 <= index < len(state.prompts):
        state.prompts.remove(index)
    return [*render_prompt_slots(state, max_slots), state]


def update_prompt(index: int, value: str, state: UIState) -> UIState:
    """Store an edited prompt; edits to hidden slots are ignored."""
    state = initialize_ui_state(state)
    if 0 <= index < len(state.prompts):
        state.prompts.edit(index, value or "")
    return state


async def generate_variations(state: UIState):
    """Run one generation and stream the two UI phases.

    The first yield clears the gallery and disables the button before any
    request is sent; the second yield shows the outcome. A run whose results
    cannot be decoded for the gallery still counts as succeeded; only the
    display error is reported.

    Args:
        state: UI state

    Yields:
        Tuples of (gallery_items, status_message, generate_button_update, updated_state)
    """
    state = initialize_ui_state(state)

    if state.is_running:
        logger.warning("Generation requested while a run is in flight; ignoring")
        yield gr.update(), gr.update(), gr.update(interactive=False), state
        return

    state = begin_run(state)
    yield [], GENERATING_MESSAGE, gr.update(interactive=False), state

    try:
        orchestrator = get_orchestrator()
        results = await orchestrator.generate_variations(state.image, state.prompts)
    except (ValidationError, UpstreamError, ConfigError, OSError) as e:
        logger.warning(f"Generation failed: {e}")
        state = fail_run(state, str(e))
        yield [], format_error(e), gr.update(interactive=state.can_generate()), state
        return
    except Exception as e:
        logger.error(f"Error generating variations: {e}", exc_info=True)
        state = fail_run(state, str(e))
        yield [], format_error(e), gr.update(interactive=state.can_generate()), state
        return

    state = complete_run(state, results)

    try:
        gallery = results_to_gallery(results)
    except ResultDecodeError as e:
        logger.error(f"Could not display results: {e}", exc_info=True)
        yield [], format_error(e), gr.update(interactive=state.can_generate()), state
        return

    status = f"✅ **Generated {len(results)} variation(s)**"
    yield gallery, status, gr.update(interactive=state.can_generate()), state
