"""Configuration management for the Illustration Variation Generator.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the VARIGEN_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (VARIGEN_* prefix)
2. .env file in the project root
3. Default values defined in VarigenConfig

The API key is the one exception to the prefix rule: it is also accepted as
GEMINI_API_KEY or plain API_KEY, since that is how most deployments expose it.

Example .env file:
    VARIGEN_API_KEY=your-key-here
    VARIGEN_MODEL_NAME=gemini-2.5-flash-image-preview
    VARIGEN_SERVER_PORT=7860

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
Creating it never fails on a missing key; the key is checked once at startup
by `require_api_key()`, which every entry point calls before serving.

Usage Example
-------------
    from varigen.core.config import config

    api_key = config.require_api_key()  # raises ConfigError if unset
    print(config.model_name)
    print(config.max_upload_bytes)

Upload Constraints
------------------
The upstream model receives the image as inline data, and inline payloads
have a size limit. `max_upload_bytes` (4 MiB by default) is an inclusive
ceiling: a file of exactly that size is accepted, one byte more is rejected.
"""

from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

#: Inline-data ceiling for uploads (4 MiB).
DEFAULT_MAX_UPLOAD_BYTES = 4 * 1024 * 1024


class VarigenConfig(BaseSettings):
    """Main configuration for the Illustration Variation Generator.

    Attributes
    ----------
    Upstream Settings:
        api_key : SecretStr | None
            Credential for the generative image API (masked in dumps/logs)
        model_name : str
            Image-capable multimodal model used for edits

    Upload Settings:
        max_upload_bytes : int
            Inclusive size ceiling for uploaded images
        allowed_mime_types : list[str]
            Accepted declared MIME types (PNG, JPEG, WEBP)

    Output Settings:
        result_mime_type : str
            MIME label used when building result data URLs

    UI Settings:
        default_prompt : str
            Prompt pre-filled in the first slot
        max_prompts : int
            Maximum number of prompt slots rendered by the UI
        server_host : str
            Server bind address
        server_port : int
            Server port (1024-65535)
        log_level : str
            Root logging level applied by the entry point

    Examples
    --------
    Create a custom configuration:

        >>> custom_config = VarigenConfig(api_key="test-key", max_prompts=4)

    Use the global configuration instance:

        >>> from varigen.core.config import config
        >>> print(config.model_name)
        'gemini-2.5-flash-image-preview'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VARIGEN_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Upstream settings
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("api_key", "VARIGEN_API_KEY", "GEMINI_API_KEY", "API_KEY"),
        description="API key for the generative image API",
    )
    model_name: str = Field(
        default="gemini-2.5-flash-image-preview",
        description="Image-capable multimodal model used for edits",
    )

    # Upload settings
    max_upload_bytes: int = Field(
        default=DEFAULT_MAX_UPLOAD_BYTES,
        description="Inclusive upload size ceiling in bytes",
        ge=1,
    )
    allowed_mime_types: list[str] = Field(
        default_factory=lambda: ["image/png", "image/jpeg", "image/webp"],
        description="Accepted declared MIME types for uploads",
    )

    # Output settings
    result_mime_type: str = Field(
        default="image/png",
        description="MIME label for result data URLs (upstream encoding is not inspected)",
    )

    # UI settings
    default_prompt: str = Field(
        default="Make the character a futuristic space explorer",
        description="Prompt pre-filled in the first slot",
    )
    max_prompts: int = Field(
        default=8,
        description="Maximum number of prompt slots",
        ge=1,
        le=32,
    )
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root logging level",
    )

    @property
    def max_upload_megabytes(self) -> int:
        """Upload ceiling in whole megabytes, for user-facing messages."""
        return self.max_upload_bytes // (1024 * 1024)

    def require_api_key(self) -> str:
        """Return the API key, failing fast if it is not configured.

        Returns:
            The plain-text API key

        Raises:
            ConfigError: If no key was supplied (or it is blank)
        """
        if self.api_key is None or not self.api_key.get_secret_value().strip():
            raise ConfigError("API_KEY environment variable not set")
        return self.api_key.get_secret_value()


# Global configuration instance
# Loads values from environment variables (VARIGEN_* prefix) and .env file.
config = VarigenConfig()
