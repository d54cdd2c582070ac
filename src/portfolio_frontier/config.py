"""Configuration models and helpers for the portfolio frontier lab."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field


class AssetConfig(BaseModel):
    """One instrument present when a session starts."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    ticker: str


def _default_assets() -> list[AssetConfig]:
    return [AssetConfig(id="inst_1", name="Instrument_1", ticker="Instrument_1")]


class DataConfig(BaseModel):
    """Synthetic data and upload configuration."""

    model_config = ConfigDict(extra="forbid")

    months: int = Field(default=84, ge=2)
    seed: int = 1337
    min_upload_returns: int = Field(default=12, ge=2)
    initial_assets: list[AssetConfig] = Field(default_factory=_default_assets)


class MetricsConfig(BaseModel):
    """Metrics computation configuration."""

    model_config = ConfigDict(extra="forbid")

    risk_free_rate_annual: float = 0.035
    periods_per_year: int = 12


class FrontierConfig(BaseModel):
    """Monte-Carlo frontier sampling configuration."""

    model_config = ConfigDict(extra="forbid")

    points: int = Field(default=2600, ge=1)
    seed: int = 2026
    buckets: int = Field(default=40, ge=1)


class WeightsConfig(BaseModel):
    """Weight editing behavior."""

    model_config = ConfigDict(extra="forbid")

    randomize_seed_offset: int = 99
    tolerance: float = 1e-9


class CommentaryConfig(BaseModel):
    """Language-model commentary configuration."""

    model_config = ConfigDict(extra="forbid")

    endpoint_path: str = "/api/ai/commentary"
    base_url: str = "http://localhost:4173"
    model: str = "gpt-4o-mini"
    temperature: float = 0.2
    max_tokens: int = 500
    api_key_env: str = "OPENAI_API_KEY"
    language: str = "English"
    timeout_seconds: float = 30.0
    notes: str = "Monthly returns, long-only; some series may come from uploaded CSV files."
    top_pairs: int = 3


class ServerConfig(BaseModel):
    """Commentary service bind address."""

    model_config = ConfigDict(extra="forbid")

    host: str = "127.0.0.1"
    port: int = 4173


class AppConfig(BaseModel):
    """Top-level package configuration."""

    model_config = ConfigDict(extra="forbid")

    data: DataConfig = Field(default_factory=DataConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    frontier: FrontierConfig = Field(default_factory=FrontierConfig)
    weights: WeightsConfig = Field(default_factory=WeightsConfig)
    commentary: CommentaryConfig = Field(default_factory=CommentaryConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @property
    def annualization_factor(self) -> int:
        """Number of return periods per year."""
        return self.metrics.periods_per_year


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """Load raw YAML config into a dictionary."""
    with Path(path).open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("YAML configuration must decode to a mapping object.")
    return data


def build_config(config_path: str | Path | None = None, overrides: dict[str, Any] | None = None) -> AppConfig:
    """Build application config with precedence: overrides > YAML > defaults."""
    merged: dict[str, Any] = {}
    if config_path is not None:
        merged.update(load_yaml_config(config_path))
    if overrides:
        merged = deep_merge(merged, overrides)
    return AppConfig.model_validate(merged)


def merge_config(config: AppConfig, overrides: dict[str, Any]) -> AppConfig:
    """Return a copy of ``config`` with nested ``overrides`` applied."""
    merged = deep_merge(config.model_dump(), overrides)
    return AppConfig.model_validate(merged)


def deep_merge(base: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    """Merge nested dictionaries recursively."""
    out = dict(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = value
    return out
