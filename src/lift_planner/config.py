import os

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _bool(name: str, default: bool) -> bool:
    """
    Helper to parse boolean environment variables.
    Accepts: 1, true, yes, on (case-insensitive).
    """
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


class Config(BaseSettings):
    """
    Application configuration loaded from environment variables.

    The progression defaults are only used by the HTTP API when a request
    leaves a rule out; the planner itself takes every parameter explicitly.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DEFAULT_PLATE_STEP: float = Field(2.5, description="Default load increment in kg")
    DEFAULT_MIN_GAIN_RATE: float = Field(0.005, description="Default required e1RM gain")
    DEFAULT_MIN_REPS: int = Field(3, description="Default lowest rep count")
    DEFAULT_MAX_REPS: int = Field(12, description="Default highest rep count")
    DEFAULT_EXPAND_RATIO: float = Field(0.10, description="Default weight search range")
    MIN_REST_DAYS: int = Field(2, description="Days between sessions")
    MAX_SEARCH_SIZE: int = Field(
        10_000, description="Largest weight x reps search an API request may trigger"
    )

    LOG_LEVEL: str = Field("INFO", description="Root log level")
    HOST: str = Field("0.0.0.0", description="HTTP bind address")
    PORT: int = Field(8080, description="HTTP port")
    ACCESS_LOG: bool = Field(
        default_factory=lambda: _bool("ACCESS_LOG", True),
        description="Enable uvicorn access log",
    )

    @field_validator("DEFAULT_PLATE_STEP", "MAX_SEARCH_SIZE")
    @classmethod
    def positive(cls, v):
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator("DEFAULT_MIN_GAIN_RATE", "MIN_REST_DAYS")
    @classmethod
    def non_negative(cls, v):
        if v < 0:
            raise ValueError("value must be non-negative")
        return v

    @field_validator("DEFAULT_EXPAND_RATIO")
    @classmethod
    def expand_ratio_range(cls, v):
        if not 0 < v < 1:
            raise ValueError("DEFAULT_EXPAND_RATIO must be between 0 and 1")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def upper_level(cls, v):
        return v.strip().upper()

    @model_validator(mode="after")
    def rep_range(self):
        if not 1 <= self.DEFAULT_MIN_REPS <= self.DEFAULT_MAX_REPS:
            raise ValueError("DEFAULT_MIN_REPS must be between 1 and DEFAULT_MAX_REPS")
        return self


SETTINGS = Config()  # pyright: ignore[reportCallIssue]
