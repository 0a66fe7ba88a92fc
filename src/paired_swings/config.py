"""Centralized engine configuration: defaults, pyproject, YAML and env overrides."""

from __future__ import annotations

from dataclasses import asdict
from datetime import tzinfo
from functools import lru_cache
import os
from pathlib import Path
import tomllib
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from omegaconf import OmegaConf
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .cohorts import CohortTable
from .exceptions import ConfigError
from .matching import MatchConfig
from .quality import QualityModelConfig
from .trajectory import FlightModelConfig


DEFAULT_CONFIG_FILE = "config/paired_swings.yaml"
ENV_PREFIX = "PAIRED_SWINGS_"


class LoggingSettings(BaseModel):
    """Log output controls for scripts and the CLI."""

    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        cleaned = value.strip().upper()
        if cleaned not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value!r}")
        return cleaned


class EngineConfig(BaseModel):
    """Typed configuration injected into every engine entry point."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    timezone: str | None = None
    matching: MatchConfig = Field(default_factory=MatchConfig)
    quality: QualityModelConfig = Field(default_factory=QualityModelConfig)
    flight: FlightModelConfig = Field(default_factory=FlightModelConfig)
    cohorts: CohortTable = Field(default_factory=CohortTable)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("timezone", mode="before")
    @classmethod
    def _blank_timezone_is_local(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value!r}") from exc
        return value

    @property
    def tz(self) -> tzinfo | None:
        """Zone used for local-time timestamps; None means the system zone."""
        return ZoneInfo(self.timezone) if self.timezone else None


def find_project_root(start: Path | None = None) -> Path:
    """Find the project root by locating `pyproject.toml`, else the cwd."""
    env_root = os.getenv(f"{ENV_PREFIX}PROJECT_ROOT")
    if env_root:
        return _resolve_path(Path(env_root), Path.cwd())

    cursor = (start or Path.cwd()).resolve()
    for candidate in (cursor, *cursor.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return cursor


def load_engine_config(project_root: Path | None = None) -> EngineConfig:
    """Load config with OmegaConf merge + Pydantic validation."""
    root = project_root or find_project_root()
    merged = _load_merged_config(root)
    try:
        return EngineConfig.model_validate(merged)
    except ValueError as exc:
        raise ConfigError(f"Invalid paired_swings config: {exc}") from exc


@lru_cache(maxsize=1)
def default_engine_config() -> EngineConfig:
    """Process-wide config resolved from the current project root."""
    return load_engine_config()


def clear_config_cache() -> None:
    """Clear cached config; useful for tests or env-var changes."""
    default_engine_config.cache_clear()


def _load_merged_config(project_root: Path) -> dict[str, Any]:
    defaults = EngineConfig()
    base_cfg = {
        "timezone": defaults.timezone,
        "matching": asdict(defaults.matching),
        "quality": asdict(defaults.quality),
        "flight": asdict(defaults.flight),
        "cohorts": asdict(defaults.cohorts),
        "logging": defaults.logging.model_dump(),
    }
    merged = OmegaConf.merge(
        OmegaConf.create(base_cfg),
        _load_pyproject_config(project_root),
        _load_file_config(project_root),
        _load_env_overrides(),
    )
    raw = OmegaConf.to_container(merged, resolve=True)
    return raw if isinstance(raw, dict) else {}


def _load_file_config(project_root: Path) -> dict[str, Any]:
    env_path = os.getenv(f"{ENV_PREFIX}CONFIG_FILE")
    if env_path:
        cfg_path = _resolve_path(Path(env_path), project_root)
        if not cfg_path.exists():
            raise ConfigError(f"{ENV_PREFIX}CONFIG_FILE points to missing file: {cfg_path}")
    else:
        cfg_path = project_root / DEFAULT_CONFIG_FILE
        if not cfg_path.exists():
            return {}

    loaded = OmegaConf.load(cfg_path)
    raw = OmegaConf.to_container(loaded, resolve=True)
    return raw if isinstance(raw, dict) else {}


def _load_env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if env_tolerance := os.getenv(f"{ENV_PREFIX}MATCH_TOLERANCE_S"):
        overrides.setdefault("matching", {})["tolerance_s"] = _parse_env_float(
            "MATCH_TOLERANCE_S", env_tolerance
        )
    if env_threshold := os.getenv(f"{ENV_PREFIX}QUALITY_THRESHOLD"):
        overrides.setdefault("quality", {})["quality_threshold"] = _parse_env_float(
            "QUALITY_THRESHOLD", env_threshold
        )
    if env_default_speed := os.getenv(f"{ENV_PREFIX}DEFAULT_INPUT_SPEED"):
        overrides.setdefault("quality", {})["default_input_speed"] = _parse_env_float(
            "DEFAULT_INPUT_SPEED", env_default_speed
        )
    if env_tz := os.getenv(f"{ENV_PREFIX}TIMEZONE"):
        overrides["timezone"] = env_tz.strip()
    if env_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        overrides["logging"] = {"level": env_level}
    return overrides


def _load_pyproject_config(project_root: Path) -> dict[str, Any]:
    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        return {}

    with pyproject_path.open("rb") as handle:
        pyproject = tomllib.load(handle)

    tool_cfg = pyproject.get("tool", {})
    engine_cfg = tool_cfg.get("paired_swings", {})
    return engine_cfg if isinstance(engine_cfg, dict) else {}


def _resolve_path(path: Path, project_root: Path) -> Path:
    if path.is_absolute():
        return path.expanduser().resolve()
    return (project_root / path).resolve()


def _parse_env_float(name: str, value: str) -> float:
    try:
        return float(value.strip())
    except ValueError as exc:
        raise ConfigError(f"{ENV_PREFIX}{name} must be a number, got {value!r}") from exc
