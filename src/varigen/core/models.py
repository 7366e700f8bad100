"""Data models for the variation pipeline."""

from dataclasses import dataclass, field
from enum import Enum

#: Scheme marker prepended to returned payloads to make a displayable reference.
DATA_URL_TEMPLATE = "data:{mime_type};base64,{data}"


@dataclass(frozen=True)
class ImageBlob:
    """Raw uploaded image bytes plus the MIME type declared by the source.

    The MIME type is kept exactly as declared; it is never re-derived from
    the file's magic bytes.
    """

    data: bytes
    mime_type: str
    filename: str = ""

    @property
    def size(self) -> int:
        """Size of the raw image in bytes."""
        return len(self.data)


@dataclass(frozen=True)
class EncodedImage:
    """Base64 view of an ImageBlob, ready for an inline-data request part."""

    data: str
    mime_type: str


@dataclass
class PromptList:
    """Ordered, user-editable list of edit prompts.

    Insertion order is significant: it determines the order of results.
    """

    prompts: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.prompts)

    def __iter__(self):
        return iter(self.prompts)

    def __getitem__(self, index: int) -> str:
        return self.prompts[index]

    def add(self, text: str = "") -> None:
        """Append a prompt (blank by default)."""
        self.prompts.append(text)

    def remove(self, index: int) -> None:
        """Remove the prompt at ``index``.

        Raises:
            IndexError: If ``index`` is out of range
        """
        del self.prompts[index]

    def edit(self, index: int, text: str) -> None:
        """Replace the prompt at ``index``.

        Raises:
            IndexError: If ``index`` is out of range
        """
        self.prompts[index] = text

    def non_blank(self) -> list[str]:
        """Return prompts that are not empty after trimming, in order.

        The prompts are returned as entered; trimming only decides inclusion.
        """
        return [p for p in self.prompts if p.strip()]


@dataclass(frozen=True)
class GenerationResult:
    """One prompt paired with the image the model produced for it."""

    prompt: str
    image_data: str
    mime_type: str = "image/png"

    @property
    def image_url(self) -> str:
        """Displayable data URL for the result image."""
        return DATA_URL_TEMPLATE.format(mime_type=self.mime_type, data=self.image_data)


class RunStatus(str, Enum):
    """Lifecycle state of one generation run."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RunOutcome:
    """Aggregate state of one generation run.

    Outcomes are replaced wholesale, never mutated: a run moves from
    ``pending`` (no results) to either ``succeeded`` (all results) or
    ``failed`` (an error message and no results).
    """

    status: RunStatus = RunStatus.IDLE
    results: tuple[GenerationResult, ...] = ()
    error: str | None = None

    @classmethod
    def idle(cls) -> "RunOutcome":
        return cls()

    @classmethod
    def pending(cls) -> "RunOutcome":
        return cls(status=RunStatus.PENDING)

    @classmethod
    def succeeded(cls, results: list[GenerationResult]) -> "RunOutcome":
        return cls(status=RunStatus.SUCCEEDED, results=tuple(results))

    @classmethod
    def failed(cls, error: str) -> "RunOutcome":
        return cls(status=RunStatus.FAILED, error=error)

    @property
    def is_pending(self) -> bool:
        return self.status is RunStatus.PENDING
