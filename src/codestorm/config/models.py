"""Configuration models describing Codestorm settings."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CodestormBaseModel(BaseModel):
    """Shared configuration for Codestorm settings models."""

    model_config = ConfigDict(extra="forbid")


class LLMSettings(CodestormBaseModel):
    """Text-generation backend options.

    Attributes:
        provider: Identifier for the language-model provider.
        model: Model name to target when issuing requests.
        temperature: Sampling temperature for generative calls.
        max_tokens: Maximum number of tokens in responses.
        api_key: Optional credential for hosted providers.
        api_base_url: Optional base URL for a proxy or self-hosted endpoint.
    """

    provider: str = "openai"
    model: str = "openai/gpt-4o-mini"
    temperature: float = 0.2
    max_tokens: int = 4_000
    api_key: Optional[str] = None
    api_base_url: Optional[str] = None


class PipelineOptions(CodestormBaseModel):
    """Options governing the project generation pipeline.

    Attributes:
        design_enabled: Whether a design proposal is requested after planning.
        visual_files_enabled: Whether `index.html` and `styles.css` are synthesized.
        segmentation_threshold: Indicator count a blob must exceed to be split.
        min_block_length: Minimum content length for fenced-block candidates.
    """

    design_enabled: bool = True
    visual_files_enabled: bool = True
    segmentation_threshold: int = Field(default=2, ge=0)
    min_block_length: int = Field(default=50, ge=0)


class LectorOptions(CodestormBaseModel):
    """Structural analysis settings.

    Attributes:
        enabled: Whether the Lector service starts active.
    """

    enabled: bool = True


class LoggingSettings(CodestormBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    max_size_mb: int = 10
    backup_count: int = 3


class CLIOptions(CodestormBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
        task_history_limit: Default number of tasks shown by `codestorm status`.
    """

    quiet_default: bool = False
    summary_default: bool = False
    task_history_limit: int = 10


class CodestormConfig(CodestormBaseModel):
    """Top-level configuration struct for Codestorm.

    Attributes:
        llm: Text-generation settings.
        pipeline: Generation pipeline settings.
        lector: Structural analysis settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    llm: LLMSettings = Field(default_factory=LLMSettings)
    pipeline: PipelineOptions = Field(default_factory=PipelineOptions)
    lector: LectorOptions = Field(default_factory=LectorOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "CodestormBaseModel",
    "LLMSettings",
    "PipelineOptions",
    "LectorOptions",
    "LoggingSettings",
    "CLIOptions",
    "CodestormConfig",
]
