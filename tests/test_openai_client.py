import os
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import pytest
from openai import APITimeoutError, OpenAIError

from arc_ask.clients.openai_client import AnthropicClient, OpenAIClient
from arc_ask.errors import BackendError, BackendTimeoutError
from arc_ask.models.message import Message, build_messages
from arc_ask.utils.config import Config


class TestOpenAIClient:
    """Test suite for OpenAIClient and AnthropicClient."""

    @pytest.fixture
    def mock_config_obj(self):
        mock_cfg = MagicMock(spec=Config)
        mock_cfg.VERBOSE = False
        mock_cfg.REQUEST_TIMEOUT = 60.0
        mock_cfg.OPENAI_BASE_URL = None
        mock_cfg.ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1/"
        return mock_cfg

    @pytest.fixture
    def mock_openai_api(self):
        """Mocks the openai.OpenAI client constructor."""
        with patch('arc_ask.clients.openai_client.OpenAI') as mock_openai_constructor:
            yield mock_openai_constructor

    @pytest.fixture
    def client(self, mock_config_obj, mock_openai_api):
        with patch.dict(os.environ, {"OPENAI_API_KEY": "test-api-key"}):
            return OpenAIClient(model="gpt-4o", config=mock_config_obj)

    def completion(self, content="answer", usage=None):
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=usage)

    def test_init(self, mock_config_obj, mock_openai_api):
        with patch.dict(os.environ, {"OPENAI_API_KEY": "test-api-key"}):
            client = OpenAIClient("gpt-4o", config=mock_config_obj)
        assert client.model == "gpt-4o"
        assert client.api_key == "test-api-key"
        mock_openai_api.assert_called_once_with(api_key="test-api-key", base_url=None, timeout=60.0, max_retries=0)

    def test_init_missing_api_key(self, mock_config_obj, mock_openai_api):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(BackendError) as exc:
                OpenAIClient("gpt-4o", config=mock_config_obj)
        assert exc.value.message == "failed to create AI client"
        assert exc.value.hint == "Set the OPENAI_API_KEY environment variable"
        mock_openai_api.assert_not_called()

    def test_anthropic_uses_its_key_and_endpoint(self, mock_config_obj, mock_openai_api):
        with patch.dict(os.environ, {"ANTHROPIC_API_KEY": "sk-ant"}, clear=True):
            client = AnthropicClient("claude-sonnet-4-5-20250929", config=mock_config_obj)
        assert client.provider == "anthropic"
        mock_openai_api.assert_called_once_with(
            api_key="sk-ant", base_url="https://api.anthropic.com/v1/", timeout=60.0, max_retries=0
        )

    def test_payload_leaves_defaults_alone(self, client):
        payload = client.build_payload(build_messages("sys", "hi"))
        assert payload == {
            "model": "gpt-4o",
            "messages": [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}],
            "stream": False,
        }

    def test_payload_with_limits(self, client):
        payload = client.build_payload([Message("user", "hi")], max_tokens=256, temperature=0.2)
        assert payload["max_tokens"] == 256
        assert payload["temperature"] == 0.2

    def test_newer_models_use_max_completion_tokens(self, mock_config_obj, mock_openai_api):
        with patch.dict(os.environ, {"OPENAI_API_KEY": "k"}):
            client = OpenAIClient("o3-mini", config=mock_config_obj)
        payload = client.build_payload([Message("user", "hi")], max_tokens=10)
        assert payload["max_completion_tokens"] == 10
        assert "max_tokens" not in payload

    def test_query_returns_text(self, client):
        usage = SimpleNamespace(prompt_tokens=3, completion_tokens=5, total_tokens=8)
        client.client.chat.completions.create.return_value = self.completion("The answer", usage)
        assert client.query([Message("user", "hi")]) == "The answer"
        client.client.chat.completions.create.assert_called_once()

    def test_query_none_content(self, client):
        client.client.chat.completions.create.return_value = self.completion(None)
        assert client.query([Message("user", "hi")]) == ""

    def test_query_timeout(self, client):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client.client.chat.completions.create.side_effect = APITimeoutError(request=request)
        with pytest.raises(BackendTimeoutError, match="timed out after 60s"):
            client.query([Message("user", "hi")])

    def test_query_api_error(self, client):
        client.client.chat.completions.create.side_effect = OpenAIError("boom")
        with pytest.raises(BackendError) as exc:
            client.query([Message("user", "hi")])
        assert exc.value.message == "AI request failed"
        assert "boom" in str(exc.value)
