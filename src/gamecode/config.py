"""Configuration management for gamecode."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SUMMARY_PROMPT = (
    "Please summarize the following conversation concisely while preserving all important information:"
)


class AgentConfig(BaseSettings):
    """Immutable policy bundle read once at manager construction."""

    model_config = SettingsConfigDict(
        env_prefix="GAMECODE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Context policy
    max_context_length: int = Field(default=32000, gt=0, description="Context size that triggers compression")
    auto_compress_context: bool = Field(default=True, description="Summarize the context when it grows too large")
    parse_embedded_tool_calls: bool = Field(
        default=True,
        description="Extract tool calls from JSON content when the backend returns none",
    )
    summary_prompt: str = Field(default=DEFAULT_SUMMARY_PROMPT, description="Instruction prepended to summaries")

    # Backend connection
    model: str = Field(default="gpt-4o-mini", description="Model name sent to the backend")
    api_base: str | None = Field(default=None, description="Endpoint selector (OpenAI-compatible base URL)")
    api_key: str | None = Field(default=None, description="Credential for the backend")
    system_prompt: str | None = Field(default=None, description="Optional system prompt for every request")
    max_tokens: int = Field(default=4096, gt=0, description="Maximum tokens per response")
    timeout_seconds: float = Field(default=120.0, gt=0, description="Request timeout for one backend call")
    max_retries: int = Field(default=2, ge=0, description="Transport retries performed by the backend client")


def get_config(**overrides: object) -> AgentConfig:
    """Load config from the environment, applying explicit overrides."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return AgentConfig(**values)  # type: ignore[arg-type]
