"""Configuration management for termrelay.

Loads settings from a YAML configuration file with environment variable
overrides for sensitive values (API keys). Supports .env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/termrelay.yaml")

DEFAULT_PREAMBLE_PROMPT = (
    "You are a command-line interface (CLI) assistant. Respond concisely, "
    "as if you are a terminal. Do not include conversational filler. Only "
    "provide the output of the command or a brief, direct response. If a "
    "command is not recognized, state 'Command not found: [command]'."
)
DEFAULT_PREAMBLE_ACK = "CLI Ready."
DEFAULT_SENTINEL = "EXECUTE_SHELL:"


class LLMConfig(BaseModel):
    provider: Literal["gemini", "openai", "anthropic"] = Field(default="gemini")
    model: str | None = Field(default=None, description="None selects the provider default")
    base_url: str | None = Field(default=None)
    max_tokens: int = Field(default=1024, gt=0)


class RelayConfig(BaseModel):
    sentinel: str = Field(default=DEFAULT_SENTINEL, min_length=1)
    preamble_prompt: str = Field(default=DEFAULT_PREAMBLE_PROMPT)
    preamble_ack: str = Field(default=DEFAULT_PREAMBLE_ACK)


class ShellConfig(BaseModel):
    enabled: bool = Field(default=True)
    working_directory: str | None = Field(default=None, description="None runs in the current directory")
    allowed_commands: list[str] = Field(default_factory=list, description="Empty allows everything")
    shell_executable: str | None = Field(default=None)


class SessionsConfig(BaseModel):
    max_sessions: int | None = Field(default=None, gt=0)
    ttl_seconds: float | None = Field(default=None, gt=0)


class EndpointConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3002, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the termrelay service.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically. Keyword arguments are treated as
    file-level values: TERMRELAY_* variables take precedence over them.
    """

    model_config = {
        "env_prefix": "TERMRELAY_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # API Keys
    gemini_api_key: SecretStr = Field(default=SecretStr(""))
    openai_api_key: SecretStr = Field(default=SecretStr(""))
    anthropic_api_key: SecretStr = Field(default=SecretStr(""))
    openrouter_api_key: SecretStr = Field(default=SecretStr(""))

    # Configuration sections
    llm: LLMConfig = Field(default_factory=LLMConfig)
    relay: RelayConfig = Field(default_factory=RelayConfig)
    shell: ShellConfig = Field(default_factory=ShellConfig)
    sessions: SessionsConfig = Field(default_factory=SessionsConfig)
    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Keyword arguments carry the YAML file contents, so they rank below the environment
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    # Load .env file manually for non-prefixed vars
    _load_dotenv()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _load_dotenv() -> None:
    """Load .env file into os.environ if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if not os.environ.get(key):
                    os.environ[key] = value


# Un-prefixed environment variables honoured for API keys
_KEY_ENV_VARS = {
    "GEMINI_API_KEY": "gemini_api_key",
    "OPENAI_API_KEY": "openai_api_key",
    "ANTHROPIC_API_KEY": "anthropic_api_key",
    "OPENROUTER_API_KEY": "openrouter_api_key",
}


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply environment variable overrides for non-prefixed vars."""
    for env_name, field_name in _KEY_ENV_VARS.items():
        value = os.environ.get(env_name, "")
        if value:
            yaml_data[field_name] = value

    if "llm" not in yaml_data:
        yaml_data["llm"] = {}

    # An OpenRouter key with no explicit provider means the OpenAI-compatible path
    if yaml_data.get("openrouter_api_key") and not yaml_data["llm"].get("provider"):
        if not yaml_data.get("gemini_api_key"):
            yaml_data["llm"]["provider"] = "openai"
