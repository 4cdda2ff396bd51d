"""Configuration classes for receipt parsing and scanning."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ParsingConfig(BaseModel):
    """Configuration for the text-to-record pipeline."""

    enable_lenient_parse: bool = Field(
        default=True,
        description="Try the JSON5 parser when strict JSON parsing fails",
    )
    enable_regex_fallback: bool = Field(
        default=True,
        description="Fall back to per-field regex extraction when parsing fails",
    )
    error_context_chars: int = Field(
        default=20,
        ge=0,
        description="Characters logged on each side of a parse error location",
    )
    log_preview_chars: int = Field(
        default=100,
        ge=0,
        description="Characters of long texts included in debug logs",
    )


class ScanConfig(BaseModel):
    """Configuration for a receipt scan (model call plus parsing)."""

    # LLM settings
    temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=2.0,
        description="LLM temperature for extraction (lower = more deterministic)",
    )
    max_tokens: int | None = Field(
        default=None,
        description="Maximum tokens for LLM response",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Maximum number of model call attempts",
    )
    use_cache: bool = Field(
        default=True,
        description="Whether the client may serve cached responses",
    )

    # Prompt settings
    prompt: str | None = Field(
        default=None,
        description="Custom extraction prompt override",
    )
    additional_context: str | None = Field(
        default=None,
        description="Extra text appended to the extraction prompt",
    )

    parsing: ParsingConfig = Field(
        default_factory=ParsingConfig,
        description="Settings for parsing the model response",
    )
