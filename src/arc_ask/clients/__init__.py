from .base import LLMClient
from .openai_client import AnthropicClient, OpenAIClient
from .ollama_client import OllamaClient

from ..errors import InvalidInputError
from ..utils.config import PROVIDERS, PROVIDER_ANTHROPIC, PROVIDER_OLLAMA, PROVIDER_OPENAI

CLIENTS: dict[str, type[LLMClient]] = {
    PROVIDER_ANTHROPIC: AnthropicClient,
    PROVIDER_OPENAI: OpenAIClient,
    PROVIDER_OLLAMA: OllamaClient,
}


def get_client_class(provider: str) -> type[LLMClient]:
    """Map a provider name onto its client class."""
    client_cls = CLIENTS.get((provider or "").strip().lower())
    if client_cls is None:
        raise InvalidInputError(
            f"unknown provider '{provider}'",
            hint=f"Supported providers: {', '.join(PROVIDERS)}",
        )
    return client_cls


__all__ = ['LLMClient', 'OpenAIClient', 'AnthropicClient', 'OllamaClient', 'get_client_class']
