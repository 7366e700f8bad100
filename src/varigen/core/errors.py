"""Exception taxonomy for the variation pipeline.

Every error raised by the core carries a message that is safe to show to the
user verbatim. Boundaries (the Gradio handlers and the REST API) reduce each
exception to that single string; no structured error code is exposed.

Hierarchy
---------
- VarigenError
    - ConfigError: missing credential at startup (fatal)
    - ValidationError: bad user input, raised before any network activity
        - MissingInput: no image uploaded, or no non-blank prompt
    - UpstreamError
        - UpstreamRefusal: the model answered with text instead of an image
        - UpstreamEmptyResponse: the model answered with neither
        - GenerationFailed: transport-level failure wrapping the cause
    - ResultDecodeError: a returned payload is not a displayable image

Encoder read failures are left as ``OSError``.
"""

EMPTY_RESPONSE_MESSAGE = "The API did not return an image. The request may have been blocked."


class VarigenError(Exception):
    """Base class for all errors raised by varigen."""

    pass


class ConfigError(VarigenError):
    """Required configuration is missing or invalid."""

    pass


class ValidationError(VarigenError):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


class MissingInput(ValidationError):
    """The run cannot start because an input is absent."""

    pass


class UpstreamError(VarigenError):
    """Base class for failures of a single edit request."""

    pass


class UpstreamRefusal(UpstreamError):
    """The model returned explanatory text instead of an image.

    Attributes:
        text: The model's text, verbatim.
    """

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"API returned text instead of an image: {text}")


class UpstreamEmptyResponse(UpstreamError):
    """The model returned neither an image nor any text."""

    def __init__(self, message: str = EMPTY_RESPONSE_MESSAGE):
        super().__init__(message)


class GenerationFailed(UpstreamError):
    """Transport-level failure (network, HTTP status, malformed body)."""

    pass


class ResultDecodeError(VarigenError):
    """A returned payload could not be decoded into a displayable image.

    Raised by the presentation layer after a successful run; the results
    themselves are kept.
    """

    pass
