"""Data models for the variation UI session state."""

from dataclasses import dataclass, field

from varigen.core.models import GenerationResult, ImageBlob, PromptList, RunOutcome


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each browser session gets its own UIState, so concurrent users never
    share an upload, a prompt list or a result gallery.

    Attributes
    ----------
    image : ImageBlob | None
        Currently uploaded image (replaced by the next upload)
    image_path : str | None
        Temp path Gradio stored the upload at, used for the preview
    prompts : PromptList
        Edit prompts in display order
    outcome : RunOutcome
        Outcome of the current (or last) generation run
    """

    image: ImageBlob | None = None
    image_path: str | None = None
    prompts: PromptList = field(default_factory=PromptList)
    outcome: RunOutcome = field(default_factory=RunOutcome.idle)

    @property
    def is_running(self) -> bool:
        """True while a generation run is in flight."""
        return self.outcome.is_pending

    @property
    def results(self) -> tuple[GenerationResult, ...]:
        """Results of the current outcome (empty unless it succeeded)."""
        return self.outcome.results

    def can_generate(self) -> bool:
        """Whether the Generate button should be enabled.

        Advisory only: the orchestrator validates again on every run.
        """
        return self.image is not None and not self.is_running

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"UIState(image={self.image.filename if self.image else None}, "
            f"prompts={len(self.prompts)}, "
            f"status={self.outcome.status.value})"
        )


# UI constants
READY_MESSAGE = "*Your generated images will appear here.*"
GENERATING_MESSAGE = "⏳ **Generating your illustrations...**\n\nThis may take a moment."
ACCEPTED_FILE_TYPES = [".png", ".jpg", ".jpeg", ".webp"]
