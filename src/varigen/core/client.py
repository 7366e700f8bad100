"""Edit-request client for the generative image API.

This module wraps a single call to an image-capable multimodal model: send an
image plus one edit prompt, get back an edited image.

Request Shape
-------------
One request with two ordered parts:
1. the source image as inline data (base64 bytes + MIME type)
2. the prompt text

The request asks for both IMAGE and TEXT response modalities, so the model
can explain itself in prose when it declines to produce an image.

Response Handling
-----------------
Only the first candidate is inspected, and its parts are searched in order:

1. The first part carrying inline image data wins. Its payload is returned
   and every other part is ignored.
2. With no image part, the first part carrying text is raised as
   :class:`UpstreamRefusal` with the text embedded verbatim. This is usually
   a refusal or a safety block explained by the model.
3. With neither, :class:`UpstreamEmptyResponse` is raised.

A text part is never treated as success, and "first part with any content" is
not the rule: an image part later in the list still beats an earlier text part.

Transport failures (network errors, error statuses, malformed bodies) are
logged and re-raised as :class:`GenerationFailed` carrying the cause's message.
Refusals and empty responses are not folded into that wrapper: they reach the
caller with their own message, not prefixed by "Failed to generate image
variation.", so a declined edit reads differently from a failed request.

Usage Example
-------------
    >>> from varigen.core.client import GeminiEditClient
    >>> from varigen.core.config import config
    >>>
    >>> client = GeminiEditClient.from_config(config)
    >>> edited_b64 = await client.edit_image(b64_data, "image/png", "add a red hat")
"""

import base64
import logging
from typing import Any

from google import genai
from google.genai import types

from .config import VarigenConfig
from .errors import GenerationFailed, UpstreamEmptyResponse, UpstreamError, UpstreamRefusal

logger = logging.getLogger(__name__)

#: Response modalities requested from the model.
RESPONSE_MODALITIES = ["IMAGE", "TEXT"]


def _first_candidate_parts(response: Any) -> list[Any]:
    """Return the parts of the first candidate, or an empty list.

    Blocked prompts can come back with no candidates, no content, or no
    parts at all; all of those count as "no parts".
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    if content is None:
        return []
    return list(getattr(content, "parts", None) or [])


def _inline_payload(part: Any) -> str | None:
    """Return the base64 payload of a part's inline data, if it has any."""
    inline_data = getattr(part, "inline_data", None)
    if inline_data is None:
        return None
    data = getattr(inline_data, "data", None)
    if not data:
        return None
    # The SDK decodes inline data to bytes; raw REST bodies keep it as text.
    if isinstance(data, (bytes, bytearray)):
        return base64.b64encode(bytes(data)).decode("ascii")
    return str(data)


def extract_image(response: Any) -> str:
    """Pick the edited image out of a model response.

    Args:
        response: A ``GenerateContentResponse`` (or any object of the same shape)

    Returns:
        Base64 payload of the first inline image part

    Raises:
        UpstreamRefusal: If there is no image part but there is a text part
        UpstreamEmptyResponse: If there is neither
    """
    parts = _first_candidate_parts(response)

    for part in parts:
        payload = _inline_payload(part)
        if payload is not None:
            return payload

    for part in parts:
        text = getattr(part, "text", None)
        if text:
            raise UpstreamRefusal(text)

    raise UpstreamEmptyResponse()


def build_contents(base64_image: str, mime_type: str, prompt: str) -> list[types.Part]:
    """Build the two ordered request parts: inline image, then prompt text."""
    return [
        types.Part(
            inline_data=types.Blob(data=base64.b64decode(base64_image), mime_type=mime_type)
        ),
        types.Part(text=prompt),
    ]


class GeminiEditClient:
    """Sends single image-edit requests to a Gemini image model.

    The credential is resolved once, at construction, and injected here; it
    is never read from the environment per call.

    Attributes
    ----------
    model_name : str
        Model used for every request
    """

    name: str = "Gemini Image Edit"
    description: str = "Instruction-based image editing via the Gemini API"

    def __init__(self, api_key: str, model_name: str, client: Any | None = None) -> None:
        """Initialize the edit client.

        Args:
            api_key: API key for the generative image API
            model_name: Image-capable model identifier
            client: Pre-built ``genai.Client`` (tests pass a fake here)
        """
        self.model_name = model_name
        self._client = client if client is not None else genai.Client(api_key=api_key)
        logger.info(f"Initialized {self.name} client with model: {self.model_name}")

    @classmethod
    def from_config(cls, config: VarigenConfig, client: Any | None = None) -> "GeminiEditClient":
        """Create a client from configuration.

        Raises:
            ConfigError: If no API key is configured
        """
        return cls(
            api_key=config.require_api_key(),
            model_name=config.model_name,
            client=client,
        )

    async def edit_image(self, base64_image: str, mime_type: str, prompt: str) -> str:
        """Edit an image according to a text prompt.

        Args:
            base64_image: Base64 image data, without a data-URL prefix
            mime_type: MIME type of the source image (e.g. ``image/png``)
            prompt: Natural-language description of the edit

        Returns:
            Base64 payload of the edited image

        Raises:
            UpstreamRefusal: The model returned text instead of an image
            UpstreamEmptyResponse: The model returned neither image nor text
            GenerationFailed: The request itself failed
        """
        logger.debug(f"Requesting edit from {self.model_name}: {prompt!r}")
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model_name,
                contents=build_contents(base64_image, mime_type, prompt),
                config=types.GenerateContentConfig(response_modalities=RESPONSE_MODALITIES),
            )
            image = extract_image(response)
        except UpstreamError as e:
            logger.warning(f"Edit for prompt {prompt!r} produced no image: {e}")
            raise
        except Exception as e:
            logger.error(f"Error calling Gemini API: {e}", exc_info=True)
            raise GenerationFailed(f"Failed to generate image variation. {e}") from e

        logger.info(f"Received edited image for prompt {prompt!r}")
        return image
