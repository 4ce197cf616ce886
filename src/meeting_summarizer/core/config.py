"""Application configuration models and loader utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, cast

from dotenv import dotenv_values
from pydantic import BaseModel, Field


class LlmSettings(BaseModel):
    """Settings for the summarization provider."""

    provider: Literal["openai", "ollama"] = Field(
        default="openai",
        description="Wire protocol: OpenAI-compatible chat completions or Ollama",
    )
    base_url: str = Field(
        default="https://api.groq.com/openai/v1", description="Provider base URL"
    )
    api_key: str | None = Field(default=None, description="Bearer token for the API")
    model: str = Field(default="llama-3.1-8b-instant", description="Model identifier")
    timeout_seconds: int = Field(
        default=60, ge=1, description="Request timeout for LLM calls"
    )
    temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for LLM completions",
    )
    max_output_tokens: int | None = Field(
        default=None,
        ge=32,
        description="Maximum tokens to request from the provider",
    )


class SmtpSettings(BaseModel):
    """Settings controlling the outbound SMTP relay."""

    host: str | None = Field(default=None, description="SMTP relay hostname")
    port: int = Field(default=587, description="SMTP port, 587 for STARTTLS")
    use_ssl: bool = Field(
        default=False, description="Use implicit TLS instead of STARTTLS"
    )
    username: str | None = Field(default=None, description="Relay login")
    password: str | None = Field(default=None, description="Relay password")
    from_address: str | None = Field(default=None, description="Envelope sender")
    from_name: str | None = Field(
        default="AI Meeting Summarizer", description="Display name for From header"
    )
    timeout_seconds: int = Field(default=30, ge=1, description="Socket timeout")

    @property
    def is_configured(self) -> bool:
        """Return ``True`` when every setting needed for live delivery is set."""
        return all((self.host, self.username, self.password, self.from_address))


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    llm: LlmSettings = Field(default_factory=LlmSettings)
    smtp: SmtpSettings = Field(default_factory=SmtpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


ENV_PREFIX = "MEETING_SUMMARIZER_"


def _normalize_key(raw_key: str) -> list[str]:
    """Convert an environment variable key into a nested attribute path."""
    trimmed = raw_key.removeprefix(ENV_PREFIX)
    return [segment.lower() for segment in trimmed.split("__") if segment]


def _merge_into_tree(tree: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a value to a nested dictionary given a path."""
    cursor = tree
    for segment in path[:-1]:
        next_node = cursor.setdefault(segment, {})
        cursor = cast(dict[str, Any], next_node)
    cursor[path[-1]] = value


def _collect_env_values(
    env_file: Path | str | None, *, include_environment: bool
) -> dict[str, Any]:
    """Load configuration values from environment variables and optional file."""
    collected: dict[str, Any] = {}

    file_values = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if key and key.startswith(ENV_PREFIX)
            }

    env_values = {}
    if include_environment:
        env_values = {
            key: value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    combined: dict[str, Any] = {**file_values, **env_values}

    for key, value in combined.items():
        path = _normalize_key(key)
        if not path:
            continue
        normalized_value: Any = value
        if isinstance(value, str) and value == "":
            normalized_value = None
        elif isinstance(value, str):
            lowercase_value = value.lower()
            if lowercase_value == "true":
                normalized_value = True
            elif lowercase_value == "false":
                normalized_value = False
        _merge_into_tree(collected, path, normalized_value)

    return collected


@lru_cache(maxsize=1)
def load_app_settings(
    env_file: Path | str | None = None,
    *,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load application settings, applying env files and overrides."""
    collected = _collect_env_values(env_file, include_environment=include_environment)
    if overrides:
        collected.update(overrides)
    return AppSettings.model_validate(collected)


__all__ = [
    "AppSettings",
    "LlmSettings",
    "LoggingSettings",
    "SmtpSettings",
    "load_app_settings",
]
