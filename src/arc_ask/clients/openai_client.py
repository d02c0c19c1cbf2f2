import logging
import os
from typing import List

from openai import APITimeoutError, OpenAI, OpenAIError

from ..clients.base import LLMClient
from ..errors import BackendError, BackendTimeoutError
from ..models.message import Message
from ..utils.config import Config, PROVIDER_ANTHROPIC, PROVIDER_OPENAI

logger = logging.getLogger(__name__)


class OpenAIClient(LLMClient):
    """Client for the OpenAI chat completions API and compatible endpoints"""

    provider = PROVIDER_OPENAI
    API_KEY_ENV = "OPENAI_API_KEY"

    def __init__(self, model: str, config: Config):
        super().__init__(model, config)
        self.api_key = self._get_api_key()
        if not self.api_key:
            raise BackendError(
                "failed to create AI client",
                cause=f"{self.provider} API key not found",
                hint=f"Set the {self.API_KEY_ENV} environment variable",
            )
        # One attempt per invocation; the SDK would otherwise retry on its own
        self.client = OpenAI(
            api_key=self.api_key,
            base_url=self._get_base_url(),
            timeout=config.REQUEST_TIMEOUT,
            max_retries=0,
        )

    def _get_api_key(self) -> str | None:
        return os.getenv(self.API_KEY_ENV)

    def _get_base_url(self) -> str | None:
        return self.config.OPENAI_BASE_URL

    def _likely_new_api_model(self) -> bool:
        """Heuristic: some newer models only accept 'max_completion_tokens'."""
        m = self.model.lower()
        return m.startswith(("o1", "o3", "o4", "gpt-5"))

    def _token_param_key(self) -> str:
        return "max_completion_tokens" if self._likely_new_api_model() else "max_tokens"

    def build_payload(self, messages: List[Message], max_tokens: int = 0, temperature: float = 0.0) -> dict:
        payload = {
            "model": self.model,
            "messages": [m.to_api_format() for m in messages],
            "stream": False,
        }
        if max_tokens > 0:
            payload[self._token_param_key()] = max_tokens
        if temperature > 0:
            payload["temperature"] = temperature
        return payload

    def query(self, messages: List[Message], max_tokens: int = 0, temperature: float = 0.0) -> str:
        payload = self.build_payload(messages, max_tokens, temperature)
        self._log_payload(payload, f"Querying {self.provider} API")

        try:
            completion = self.client.chat.completions.create(**payload)
        except APITimeoutError as e:
            raise BackendTimeoutError(self.config.REQUEST_TIMEOUT, cause=e) from e
        except OpenAIError as e:
            logger.debug(f"Error making {self.provider} API request: {e}")
            raise BackendError("AI request failed", cause=e) from e

        response_text = completion.choices[0].message.content or ""
        usage = completion.usage
        if usage:
            usage_line = f"Tokens: Prompt={usage.prompt_tokens}, Completion={usage.completion_tokens}, Total={usage.total_tokens}"
            if self.config.VERBOSE:
                self.console.print(f"[dim]{usage_line}[/dim]")
            else:
                logger.debug(usage_line)
        return response_text


class AnthropicClient(OpenAIClient):
    """Claude models through Anthropic's OpenAI-compatible endpoint"""

    provider = PROVIDER_ANTHROPIC
    API_KEY_ENV = "ANTHROPIC_API_KEY"

    def _get_base_url(self) -> str | None:
        return self.config.ANTHROPIC_BASE_URL

    def _likely_new_api_model(self) -> bool:
        return False
