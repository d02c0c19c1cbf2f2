from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..core import ResolvedPrompt


@dataclass
class AskOptions:
    """Per-request knobs; zero values leave the backend's defaults in place."""

    max_tokens: int = 0
    temperature: float = 0.0
    tools: list[str] = field(default_factory=list)


@dataclass
class BackendResult:
    text: str
    provider: str
    model: str
    backend: str


class Backend(ABC):
    """A strategy for answering one ResolvedPrompt."""

    name = "backend"

    @abstractmethod
    def is_available(self) -> bool:
        """Whether this backend's primary path can be used right now."""

    @abstractmethod
    def ask(self, prompt: ResolvedPrompt, options: AskOptions | None = None) -> BackendResult:
        """Make exactly one backend call for ``prompt``.

        Raises:
            CLIError: any failure, already wrapped with a user-facing message.
        """
