"""Gradio UI for the Illustration Variation Generator."""

import logging

import gradio as gr

from varigen.core.config import config

from .handlers import (
    add_prompt,
    generate_variations,
    handle_image_upload,
    remove_prompt,
    update_prompt,
)
from .models import ACCEPTED_FILE_TYPES, READY_MESSAGE, UIState
from .state import initialize_ui_state
from .validation import describe_allowed_types

logger = logging.getLogger(__name__)


def create_ui() -> gr.Blocks:
    """Create the Gradio UI.

    Returns:
        Gradio Blocks app
    """
    app = gr.Blocks(title="Illustration Variation Generator")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(initialize_ui_state(UIState()))

        gr.Markdown(
            """
            # Illustration Variation Generator
            ### Upload your artwork, describe the changes, and let AI generate new versions
            """
        )

        with gr.Row():
            with gr.Column(scale=1):
                upload, preview = create_upload_section()
                prompt_section = create_prompt_section()

                generate_btn = gr.Button(
                    "✨ Generate Variations",
                    variant="primary",
                    size="lg",
                    interactive=False,
                )

            with gr.Column(scale=1):
                gr.Markdown("### 3. Generated Results")
                status_output = gr.Markdown(value=READY_MESSAGE)
                results_gallery = gr.Gallery(
                    label="Results",
                    columns=1,
                    height="auto",
                    object_fit="contain",
                    show_label=False,
                )

        gr.Markdown(f"---\n**Model:** {config.model_name}")

        # Upload events (not .change, so restoring a rejected upload doesn't re-fire)
        upload.upload(
            fn=handle_image_upload,
            inputs=[upload, ui_state],
            outputs=[upload, preview, status_output, generate_btn, ui_state],
        )
        upload.clear(
            fn=handle_image_upload,
            inputs=[upload, ui_state],
            outputs=[upload, preview, status_output, generate_btn, ui_state],
        )

        # Prompt list events
        slot_outputs = [
            *prompt_section["rows"],
            *prompt_section["textboxes"],
            prompt_section["add_button"],
            ui_state,
        ]
        prompt_section["add_button"].click(
            fn=add_prompt,
            inputs=[ui_state],
            outputs=slot_outputs,
        )
        for index, (textbox, remove_btn) in enumerate(
            zip(prompt_section["textboxes"], prompt_section["remove_buttons"])
        ):
            textbox.input(
                fn=lambda value, state, i=index: update_prompt(i, value, state),
                inputs=[textbox, ui_state],
                outputs=[ui_state],
            )
            remove_btn.click(
                fn=lambda state, i=index: remove_prompt(i, state),
                inputs=[ui_state],
                outputs=slot_outputs,
            )

        # Generation
        generate_btn.click(
            fn=generate_variations,
            inputs=[ui_state],
            outputs=[results_gallery, status_output, generate_btn, ui_state],
        )

    return app


def create_upload_section() -> tuple[gr.File, gr.Image]:
    """Create the image upload step.

    The file input hands the handler the uploaded file untouched; the image
    component only previews the accepted upload.

    Returns:
        Tuple of (upload_input, preview)
    """
    gr.Markdown("### 1. Upload Your Image")
    gr.Markdown(
        f"*Upload a {describe_allowed_types(config.allowed_mime_types)} file. "
        f"Max size: {config.max_upload_megabytes}MB.*"
    )
    upload = gr.File(
        label="Source Image",
        file_types=ACCEPTED_FILE_TYPES,
        file_count="single",
        type="filepath",
    )
    preview = gr.Image(
        label="Preview",
        type="filepath",
        interactive=False,
        height=300,
    )
    return upload, preview


def create_prompt_section() -> dict:
    """Create the prompt list step with a fixed number of slots.

    Slots beyond the current prompt count are hidden; add/remove handlers
    re-render the visible slots from the session's PromptList.

    Returns:
        Dict with ``rows``, ``textboxes``, ``remove_buttons`` and ``add_button``
    """
    gr.Markdown("### 2. Describe Variations")

    rows, textboxes, remove_buttons = [], [], []
    for index in range(config.max_prompts):
        with gr.Row(visible=index == 0) as row:
            textbox = gr.Textbox(
                value=config.default_prompt if index == 0 else "",
                placeholder="e.g., Change outfit to a red dress",
                show_label=False,
                scale=8,
                container=False,
            )
            remove_btn = gr.Button("🗑", size="sm", scale=1, min_width=40)
        rows.append(row)
        textboxes.append(textbox)
        remove_buttons.append(remove_btn)

    add_button = gr.Button("➕ Add Another Variation Prompt", variant="secondary", size="sm")

    return {
        "rows": rows,
        "textboxes": textboxes,
        "remove_buttons": remove_buttons,
        "add_button": add_button,
    }
