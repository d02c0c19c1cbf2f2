import logging
from typing import List

import requests

from arc_ask.clients.base import LLMClient
from arc_ask.errors import BackendError, BackendTimeoutError
from arc_ask.models.message import Message
from arc_ask.utils.config import Config, PROVIDER_OLLAMA

# Get logger instance
logger = logging.getLogger(__name__)


class OllamaClient(LLMClient):
    provider = PROVIDER_OLLAMA

    def __init__(self, model: str, config: Config):
        super().__init__(model, config)

    def build_payload(self, messages: List[Message], max_tokens: int = 0, temperature: float = 0.0) -> dict:
        options = {}
        if max_tokens > 0:
            options["num_predict"] = max_tokens
        if temperature > 0:
            options["temperature"] = temperature
        payload = {
            "model": self.model,
            "messages": [m.to_api_format() for m in messages],
            "stream": False,
        }
        if options:
            payload["options"] = options
        return payload

    def query(self, messages: List[Message], max_tokens: int = 0, temperature: float = 0.0) -> str:
        """Query the Ollama chat API once, without streaming."""
        payload = self.build_payload(messages, max_tokens, temperature)
        self._log_payload(payload, "Querying Ollama API", style="purple")

        try:
            response = requests.post(
                f"{self.config.OLLAMA_URL}/api/chat",
                json=payload,
                timeout=self.config.REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise BackendTimeoutError(self.config.REQUEST_TIMEOUT, cause=e) from e
        except requests.exceptions.ConnectionError as e:
            raise BackendError(
                "AI request failed",
                cause=f"Could not connect to Ollama server at {self.config.OLLAMA_URL}",
                hint="Ensure Ollama is running (ollama serve)",
            ) from e
        except (requests.exceptions.RequestException, ValueError) as e:
            raise BackendError("AI request failed", cause=e) from e

        if data.get("error"):
            raise BackendError("AI request failed", cause=data["error"])
        return data.get("message", {}).get("content", "")
