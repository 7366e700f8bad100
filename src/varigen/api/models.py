"""Pydantic response models for the Variation API.

FastAPI uses these for serialisation and OpenAPI documentation. Requests to
``POST /api/variations`` are multipart form uploads, so there is no request
body model; the form fields are declared on the route itself.

Models
------
VariationResult
    One generated variation: the prompt and a displayable image URL.
VariationsResponse
    Payload of ``POST /api/variations``: results in prompt order.
ConfigResponse
    Payload of ``GET /api/config``: limits the frontend needs to know.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from varigen.core.models import GenerationResult


class VariationResult(BaseModel):
    """One generated variation.

    Attributes:
        prompt: The prompt the variation was generated from, as entered.
        image_url: ``data:`` URL of the generated image.
    """

    prompt: str = Field(
        ...,
        description="Prompt the variation was generated from.",
    )
    image_url: str = Field(
        ...,
        description="Base64 data URL of the generated image.",
    )

    @classmethod
    def from_result(cls, result: GenerationResult) -> VariationResult:
        """Build the API model from a core GenerationResult."""
        return cls(prompt=result.prompt, image_url=result.image_url)


class VariationsResponse(BaseModel):
    """Response body for ``POST /api/variations``.

    Attributes:
        count: Number of variations (equals the number of non-blank prompts).
        results: Variations in the same order as the submitted prompts.
    """

    count: int = Field(
        ...,
        description="Number of generated variations.",
    )
    results: list[VariationResult] = Field(
        default_factory=list,
        description="Variations in prompt order.",
    )


class ConfigResponse(BaseModel):
    """Response body for ``GET /api/config``.

    Attributes:
        version: API version string.
        model_name: Upstream model used for edits.
        max_upload_bytes: Inclusive upload size ceiling.
        allowed_mime_types: Accepted upload MIME types.
        max_prompts: Maximum number of prompts the UI offers.
    """

    version: str
    model_name: str
    max_upload_bytes: int
    allowed_mime_types: list[str]
    max_prompts: int
