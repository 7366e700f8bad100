"""Core functionality for image variation generation.

This module provides the non-UI pipeline of the Illustration Variation
Generator:

- **Encoder** (encoder.py): uploaded file -> (base64 payload, MIME type)
- **Edit client** (client.py): one image + one prompt -> one edited image
- **Orchestrator** (orchestrator.py): one image + N prompts -> N results,
  all-or-nothing
- **VarigenConfig** (config.py): configuration via Pydantic Settings
- **config**: Global configuration instance (loads from environment variables)

Architecture Overview
---------------------
Data flows one way:

1. The presentation layer collects an ImageBlob and a PromptList.
2. The orchestrator validates them and encodes the image once.
3. The orchestrator calls the edit client once per non-blank prompt,
   concurrently, and joins on all of them.
4. Results (or the first failure) flow back to the presentation layer.

Usage Example
-------------
    import asyncio

    from varigen.core import GeminiEditClient, VariationOrchestrator, config, read_image

    client = GeminiEditClient.from_config(config)
    orchestrator = VariationOrchestrator(client)
    results = asyncio.run(
        orchestrator.generate_variations(read_image("cat.png"), ["red background"])
    )
    print(results[0].image_url[:40])
"""

from varigen.core.client import GeminiEditClient, extract_image
from varigen.core.config import VarigenConfig, config
from varigen.core.encoder import encode_image, read_image
from varigen.core.models import (
    EncodedImage,
    GenerationResult,
    ImageBlob,
    PromptList,
    RunOutcome,
    RunStatus,
)
from varigen.core.orchestrator import VariationOrchestrator, validate_run_inputs

__all__ = [
    "EncodedImage",
    "GeminiEditClient",
    "GenerationResult",
    "ImageBlob",
    "PromptList",
    "RunOutcome",
    "RunStatus",
    "VarigenConfig",
    "VariationOrchestrator",
    "config",
    "encode_image",
    "extract_image",
    "read_image",
    "validate_run_inputs",
]
