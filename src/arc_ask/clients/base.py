import json
import logging
from abc import ABC, abstractmethod
from typing import List

from rich.console import Console
from rich.json import JSON
from rich.rule import Rule

from ..models.message import Message
from ..utils.config import Config # Import Config for type hinting

logger = logging.getLogger(__name__)


class LLMClient(ABC):
    """Abstract base class for provider clients used by the direct backend."""

    provider = "unknown"

    def __init__(self, model: str, config: Config):
        self.model = model
        self.config = config
        # stdout is reserved for the answer
        self.console = Console(stderr=True)

    @abstractmethod
    def query(self, messages: List[Message], max_tokens: int = 0, temperature: float = 0.0) -> str:
        """Send one non-streaming request and return the answer text.

        Args:
            messages: System and user messages for the request.
            max_tokens: Output token budget; 0 leaves the provider default.
            temperature: Sampling temperature; 0 leaves the provider default.

        Raises:
            BackendError: the provider failed, or BackendTimeoutError when the
                configured REQUEST_TIMEOUT elapsed.
        """

    def _log_payload(self, payload: dict, title: str, style: str = "green") -> None:
        """Show the request payload when verbose, or log it at DEBUG."""
        if self.config.VERBOSE:
            self.console.print(Rule(title, style=style))
            try:
                self.console.print(JSON(json.dumps(payload, indent=2)))
            except TypeError as e:
                logger.error(f"Could not serialize payload for Rich JSON printing: {e}")
                self.console.print(f"[red]Error printing payload:[/red] {e}")
            self.console.print(Rule(style=style))
        elif logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"{title} payload: {json.dumps(payload)}")
