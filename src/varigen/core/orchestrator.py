"""Variation orchestrator: one image, many prompts, one outcome.

The orchestrator validates its inputs, encodes the image once, and issues one
edit request per non-blank prompt. All requests run concurrently and the run
waits for every one of them before producing an outcome.

Aggregation is all-or-nothing:

- every request succeeds: one :class:`GenerationResult` per prompt, in the
  order the prompts were given (not the order the requests finished)
- any request fails: the run fails with the error of the earliest failing
  prompt, and the successes are discarded

There is no retry, no timeout and no cancellation; a hung upstream call hangs
the run.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Protocol

from .encoder import encode_image
from .errors import MissingInput
from .models import GenerationResult, ImageBlob, PromptList

logger = logging.getLogger(__name__)

MISSING_IMAGE_MESSAGE = "Please upload an image first."
MISSING_PROMPT_MESSAGE = "Please provide at least one generation prompt."


class EditClient(Protocol):
    """Anything that can perform a single image edit."""

    async def edit_image(self, base64_image: str, mime_type: str, prompt: str) -> str: ...


def select_prompts(prompts: PromptList | Iterable[str]) -> list[str]:
    """Return the prompts that are not blank after trimming, in input order."""
    if isinstance(prompts, PromptList):
        return prompts.non_blank()
    return [p for p in prompts if p and p.strip()]


def validate_run_inputs(
    image: ImageBlob | None, prompts: PromptList | Iterable[str]
) -> list[str]:
    """Check that a run can start, before any network activity.

    Args:
        image: Uploaded image, or None if nothing was uploaded
        prompts: Prompt list as entered by the user

    Returns:
        The non-blank prompts to execute

    Raises:
        MissingInput: If no image is present or every prompt is blank
    """
    if image is None:
        raise MissingInput(MISSING_IMAGE_MESSAGE)

    selected = select_prompts(prompts)
    if not selected:
        raise MissingInput(MISSING_PROMPT_MESSAGE)
    return selected


class VariationOrchestrator:
    """Fans one image out to an edit client, once per prompt."""

    def __init__(self, client: EditClient, result_mime_type: str = "image/png") -> None:
        """Initialize the orchestrator.

        Args:
            client: Edit client used for every request
            result_mime_type: MIME label given to every result's data URL
        """
        self.client = client
        self.result_mime_type = result_mime_type

    async def generate_variations(
        self, image: ImageBlob | None, prompts: PromptList | Iterable[str]
    ) -> list[GenerationResult]:
        """Generate one variation of ``image`` per non-blank prompt.

        Args:
            image: Uploaded image
            prompts: Prompt list; blank entries are skipped

        Returns:
            Results in prompt order

        Raises:
            MissingInput: Validation failed; no request was issued
            UpstreamError: The earliest failing prompt's error
        """
        selected = validate_run_inputs(image, prompts)
        encoded = encode_image(image)

        logger.info(f"Starting run: {len(selected)} prompt(s) for {image.filename or 'upload'}")

        outcomes = await asyncio.gather(
            *(self.client.edit_image(encoded.data, encoded.mime_type, p) for p in selected),
            return_exceptions=True,
        )

        for prompt, outcome in zip(selected, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Run failed on prompt {prompt!r}: {outcome}")
                raise outcome

        results = [
            GenerationResult(prompt=prompt, image_data=data, mime_type=self.result_mime_type)
            for prompt, data in zip(selected, outcomes)
        ]
        logger.info(f"Run complete: {len(results)} variation(s)")
        return results
