"""
Configuration Models

Pydantic models describing every mockseam setting. Unknown keys are rejected
so that typos in a settings file surface as validation errors.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MockSettings(BaseModel):
    """Behaviour of newly created mocks."""
    model_config = ConfigDict(extra="forbid")

    default_mode: Literal["strict", "lenient", "partial"] = "lenient"
    type_checking: bool = True
    signature_checking: bool = True

    @field_validator("default_mode", mode="before")
    @classmethod
    def _lower_mode(cls, value):
        return value.lower() if isinstance(value, str) else value


class VerificationSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    report_invocations: bool = True


class LoggingSettings(BaseModel):
    """Where registry diagnostics go."""
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["text", "json"] = "text"
    output: Literal["console", "file", "both"] = "console"
    file_path: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _file_output_needs_path(self) -> "LoggingSettings":
        if self.output in ("file", "both") and not self.file_path:
            raise ValueError(f"logging.output={self.output!r} requires logging.file_path")
        return self


class MockseamSettings(BaseModel):
    """Top-level settings document."""
    model_config = ConfigDict(extra="forbid")

    mocks: MockSettings = Field(default_factory=MockSettings)
    verification: VerificationSettings = Field(default_factory=VerificationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
