"""Configuration models describing mindstash settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class MindstashBaseModel(BaseModel):
    """Shared configuration for mindstash settings models."""

    model_config = ConfigDict(extra="forbid")


class IngestionOptions(MindstashBaseModel):
    """Options governing chunked bulk ingestion.

    Attributes:
        chunk_size: Number of files processed concurrently per chunk.
        yield_delay_seconds: Pause between chunks so a host UI can repaint.
        cooldown_seconds: Delay before a finished session reports idle.
        item_timeout_seconds: Optional cap on a single file read; expired
            reads fall back to an empty note.
    """

    chunk_size: int = Field(default=5, ge=1)
    yield_delay_seconds: float = Field(default=0.01, ge=0)
    cooldown_seconds: float = Field(default=0.5, ge=0)
    item_timeout_seconds: Optional[float] = Field(default=None, gt=0)


class TraversalOptions(MindstashBaseModel):
    """Options governing directory expansion of dropped entries.

    Attributes:
        include_hidden: Whether dot-prefixed entries below a dropped root are kept.
        follow_symlinks: Whether symbolic links below a dropped root are traversed;
            directory cycles are detected and skipped.
        max_concurrency: Upper bound on simultaneous directory reads.
    """

    include_hidden: bool = True
    follow_symlinks: bool = True
    max_concurrency: int = Field(default=16, ge=1)


class QueryDefaults(MindstashBaseModel):
    """Default query parameters used by the CLI.

    Attributes:
        sort_key: Sort key applied when none is given.
        sort_direction: Direction applied when none is given.
        result_limit: Maximum rows rendered in tables.
    """

    sort_key: Literal["date", "name", "size"] = "date"
    sort_direction: Literal["asc", "desc"] = "desc"
    result_limit: int = Field(default=50, ge=1)


class LoggingSettings(MindstashBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class CLIOptions(MindstashBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class MindstashConfig(MindstashBaseModel):
    """Top-level configuration struct for mindstash.

    Attributes:
        ingestion: Chunked ingestion settings.
        traversal: Directory traversal settings.
        query: Query defaults.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    ingestion: IngestionOptions = Field(default_factory=IngestionOptions)
    traversal: TraversalOptions = Field(default_factory=TraversalOptions)
    query: QueryDefaults = Field(default_factory=QueryDefaults)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "MindstashBaseModel",
    "IngestionOptions",
    "TraversalOptions",
    "QueryDefaults",
    "LoggingSettings",
    "CLIOptions",
    "MindstashConfig",
]
