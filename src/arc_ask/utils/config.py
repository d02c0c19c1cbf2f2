import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROVIDER_ANTHROPIC = "anthropic"
PROVIDER_OPENAI = "openai"
PROVIDER_OLLAMA = "ollama"
PROVIDERS = (PROVIDER_ANTHROPIC, PROVIDER_OPENAI, PROVIDER_OLLAMA)

BACKEND_DIRECT = "direct"
BACKEND_BRIDGE = "bridge"
BACKENDS = (BACKEND_DIRECT, BACKEND_BRIDGE)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(xdg_config_home) / "arc"


def get_default_env_path() -> Path:
    env_path = os.environ.get("ARC_ASK_ENV_FILE")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "ask.env"


class Config(BaseSettings):
    PROVIDER: str = Field(default=PROVIDER_ANTHROPIC, description="Provider used by the direct backend (anthropic, openai, ollama)")
    DEFAULT_MODEL: str = Field(default=DEFAULT_MODEL, description="Model used when neither --model nor the template pins one")
    BACKEND: str = Field(default=BACKEND_DIRECT, description="Backend strategy: 'direct' provider client or 'bridge' to the arc-ai daemon")
    PROMPTS_DIR: str = Field(default=str(get_config_dir() / "prompts"), description="Directory holding <name>.yaml prompt templates")
    REQUEST_TIMEOUT: float = Field(default=60.0, description="Seconds allowed for the whole backend call")

    OLLAMA_URL: str = Field(default="http://localhost:11434")
    OPENAI_BASE_URL: Optional[str] = Field(default=None, description="Override for OpenAI-compatible endpoints")
    ANTHROPIC_BASE_URL: str = Field(default="https://api.anthropic.com/v1/", description="Anthropic OpenAI-compatible endpoint")

    VERBOSE: bool = Field(default=False, description="Verbose mode for debugging")

    model_config = SettingsConfigDict(
        env_prefix="ARC_ASK_",
        env_file=get_default_env_path(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra='ignore'
    )

    def __init__(self, **values: Any):
        super().__init__(**values)
        logger.debug(f"Config loaded: backend={self.BACKEND} provider={self.PROVIDER} prompts={self.PROMPTS_DIR}")

    @field_validator("PROMPTS_DIR")
    @classmethod
    def _expand_prompts_dir(cls, value: str) -> str:
        return str(Path(value).expanduser())

    @field_validator("PROVIDER", "BACKEND")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def prompts_path(self) -> Path:
        return Path(self.PROMPTS_DIR)
