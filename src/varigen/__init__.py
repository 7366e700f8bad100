"""Illustration Variation Generator - AI edits of an uploaded image, one per prompt."""

__version__ = "0.1.0"

from varigen.core.config import VarigenConfig, config
from varigen.core.errors import (
    ConfigError,
    GenerationFailed,
    MissingInput,
    UpstreamEmptyResponse,
    UpstreamRefusal,
    ValidationError,
)
from varigen.core.orchestrator import VariationOrchestrator

__all__ = [
    "ConfigError",
    "GenerationFailed",
    "MissingInput",
    "UpstreamEmptyResponse",
    "UpstreamRefusal",
    "ValidationError",
    "VarigenConfig",
    "VariationOrchestrator",
    "config",
]
