import logging

from ..clients import LLMClient, get_client_class
from ..core import ResolvedPrompt
from ..models.message import build_messages
from ..utils.config import BACKEND_DIRECT, Config
from .base import AskOptions, Backend, BackendResult

logger = logging.getLogger(__name__)


class DirectBackend(Backend):
    """Calls the model provider's API straight from this process."""

    name = BACKEND_DIRECT

    def __init__(self, config: Config, provider: str | None = None):
        self.config = config
        self.provider = (provider or config.PROVIDER).strip().lower()
        # Fail fast on an unknown provider before any input is gathered
        self.client_cls = get_client_class(self.provider)

    def is_available(self) -> bool:
        return True

    def create_client(self, model: str) -> LLMClient:
        return self.client_cls(model, self.config)

    def ask(self, prompt: ResolvedPrompt, options: AskOptions | None = None) -> BackendResult:
        options = options or AskOptions()
        if options.tools:
            logger.debug(f"Ignoring tools {options.tools}: only the bridge backend supports tools")

        client = self.create_client(prompt.model)
        logger.debug(f"Querying {self.provider} model {prompt.model}")
        text = client.query(
            build_messages(prompt.system, prompt.user),
            max_tokens=options.max_tokens,
            temperature=options.temperature,
        )
        return BackendResult(text=text, provider=self.provider, model=prompt.model, backend=self.name)
