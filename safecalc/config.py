"""Application configuration using pydantic-settings.

Loads settings from environment variables and .env file.
Evaluator limits and API bounds loaded from calculator.toml.

Priority: CLI args > Environment variables (.env) > calculator.toml > hardcoded defaults
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from safecalc.engine.parser import DEFAULT_MAX_DEPTH, DEFAULT_SIGNIFICANT_DIGITS, MAX_DEPTH_LIMIT

CONFIG_PATH = Path(__file__).parent.parent / "calculator.toml"


# ---------------------------------------------------------------------------
# Calculator settings from calculator.toml
# ---------------------------------------------------------------------------


class EvaluatorConfig(BaseModel):
    """The [evaluator] table from calculator.toml."""

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH_LIMIT)
    significant_digits: int = Field(default=DEFAULT_SIGNIFICANT_DIGITS, ge=1, le=17)
    max_expression_length: int = Field(default=1000, ge=1)


class APIConfig(BaseModel):
    """The [api] table from calculator.toml."""

    max_batch_size: int = Field(default=100, ge=1)


class CalcSettings(BaseModel):
    """Configuration loaded from calculator.toml."""

    evaluator: EvaluatorConfig = Field(default_factory=EvaluatorConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    def evaluate_kwargs(self) -> dict[str, int]:
        """Keyword arguments for ``evaluate`` derived from the [evaluator] table."""
        return {
            "max_depth": self.evaluator.max_depth,
            "significant_digits": self.evaluator.significant_digits,
        }


def load_calc_settings(path: Path) -> CalcSettings:
    """Parse a calculator.toml file; a missing file yields defaults."""
    if not path.exists():
        return CalcSettings()
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return CalcSettings.model_validate(data)


_CALC_SETTINGS_CACHE: CalcSettings | None = None


def get_calc_settings() -> CalcSettings:
    """Load and cache calculator settings from calculator.toml."""
    global _CALC_SETTINGS_CACHE
    if _CALC_SETTINGS_CACHE is None:
        _CALC_SETTINGS_CACHE = load_calc_settings(CONFIG_PATH)
    return _CALC_SETTINGS_CACHE


# ---------------------------------------------------------------------------
# Environment settings from .env (env-var overrides)
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SAFECALC_",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Comma-separated list of allowed CORS origins for the API
    cors_origins: str = ""

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
