"""
Configuration Schema and Models

Defines Pydantic models for the configuration schema, providing validation,
default values, and type checking for all configuration options.

Author: dirmirror Project
License: MIT
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.file_ops import paths_overlap


class LogLevel(str, Enum):
    """Logging level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _validate_cron(expression: Optional[str]) -> Optional[str]:
    if expression is None:
        return None
    expression = " ".join(expression.split())
    if len(expression.split()) != 5:
        raise ValueError(f"Cron expression must have 5 fields: {expression!r}")
    return expression


class AppConfig(BaseModel):
    """Logging and general application settings."""

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        validate_default=True,
        description="Application logging level"
    )
    log_to_file: bool = Field(
        default=False,
        description="Enable logging to file"
    )
    log_file_path: str = Field(
        default="logs/dirmirror.log",
        description="Path of the log file"
    )
    log_rotation_size: int = Field(
        default=10485760,  # 10MB
        gt=0,
        description="Log file size before rotation (bytes)"
    )
    log_retention_count: int = Field(
        default=5,
        ge=0,
        description="Number of rotated log files to keep"
    )
    json_logs: bool = Field(
        default=False,
        description="Emit logs as JSON"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.upper()
        return v


class MirrorJob(BaseModel):
    """A set of source directories mirrored into one target directory."""

    name: str = Field(
        description="Unique job name"
    )
    sources: List[str] = Field(
        min_length=1,
        description="Source directories, in conflict-reporting order"
    )
    target: str = Field(
        description="Target directory"
    )
    enabled: bool = Field(
        default=True,
        description="Whether the job runs"
    )
    schedule: Optional[str] = Field(
        default=None,
        description="Cron expression for this job (None uses the default schedule)"
    )
    watch: bool = Field(
        default=False,
        description="Re-run the job when a source directory changes"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Ensure the name is not blank."""
        v = v.strip()
        if not v:
            raise ValueError("Job name must not be empty")
        return v

    @field_validator("sources")
    @classmethod
    def validate_sources(cls, v):
        """Strip trailing separators and reject duplicates."""
        normalized = [source.rstrip("/\\") or source for source in v]
        if any(not source for source in normalized):
            raise ValueError("Source paths must not be empty")
        if len(normalized) != len(set(normalized)):
            raise ValueError("Duplicate source paths in mirror job")
        return normalized

    @field_validator("target")
    @classmethod
    def validate_target(cls, v, info):
        """Ensure the target neither is a source nor nests with one."""
        target = v.rstrip("/\\") or v
        if not target:
            raise ValueError("Target path must not be empty")
        for source in info.data.get("sources", []):
            if paths_overlap(source, target):
                raise ValueError(f"Target {target} overlaps source {source}")
        return target

    @field_validator("schedule")
    @classmethod
    def validate_schedule(cls, v):
        return _validate_cron(v)


class SchedulingConfig(BaseModel):
    """Task scheduling configuration."""

    default_schedule: Optional[str] = Field(
        default="*/15 * * * *",
        description="Default cron expression (every 15 minutes); None disables scheduled runs"
    )
    retry_attempts: int = Field(
        default=3,
        ge=0,
        description="Number of retries for a job failing with an I/O error"
    )
    retry_delay: float = Field(
        default=5.0,
        ge=0,
        description="Delay between retries in seconds"
    )

    @field_validator("default_schedule")
    @classmethod
    def validate_default_schedule(cls, v):
        return _validate_cron(v)


class MonitoringConfig(BaseModel):
    """Source change monitoring configuration."""

    debounce_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Quiet period after the last change before a job re-runs"
    )
    poll_interval: float = Field(
        default=1.0,
        gt=0,
        description="How often pending changes are checked (seconds)"
    )


class Config(BaseModel):
    """
    Root configuration model for dirmirror.

    Loaded from config.yaml and overridable by environment variables.
    """

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    app: AppConfig = Field(default_factory=AppConfig)
    mirrors: List[MirrorJob] = Field(
        default=[],
        description="Mirror jobs"
    )
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    @field_validator("mirrors")
    @classmethod
    def validate_unique_names(cls, v):
        """Ensure no duplicate job names."""
        names = [job.name for job in v]
        if len(names) != len(set(names)):
            raise ValueError("Duplicate mirror job names detected in configuration")
        return v

    def enabled_mirrors(self) -> List[MirrorJob]:
        return [job for job in self.mirrors if job.enabled]

    def get_mirror(self, name: str) -> Optional[MirrorJob]:
        for job in self.mirrors:
            if job.name == name:
                return job
        return None
