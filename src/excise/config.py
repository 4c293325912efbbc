from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from excise.errors import ConfigError
from excise.models import (
    DEFAULT_RESOLVE_EXTENSIONS,
    DEFAULT_SOURCE_EXTENSIONS,
    RunContext,
    normalize_path,
)

CONFIG_FILE_NAME = "excise.json"


class ExciseConfig(BaseModel):
    """Settings read from ``excise.json`` at the project root."""

    model_config = ConfigDict(extra="forbid")

    base_dir: str = "src"
    resolve_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RESOLVE_EXTENSIONS)
    )
    source_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS)
    )
    aliases: dict[str, str] = Field(default_factory=dict)
    exclude: list[str] = Field(default_factory=list)
    audit_dir: str = "."

    @field_validator("resolve_extensions", "source_extensions")
    @classmethod
    def _check_extensions(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one extension is required")
        for ext in value:
            if not ext.startswith(".") or len(ext) < 2:
                raise ValueError(f"extension must look like '.ts', got {ext!r}")
        return value


def load_config(project_root: Path, config_path: Path | None = None) -> ExciseConfig:
    explicit = config_path is not None
    path = config_path if config_path is not None else project_root / CONFIG_FILE_NAME
    if not path.exists():
        if explicit:
            raise ConfigError(f"Config file does not exist: {path}")
        return ExciseConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Can not read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
    try:
        return ExciseConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {path}:\n{exc}") from exc


def build_context(project_root: Path, config: ExciseConfig) -> RunContext:
    root = normalize_path(project_root)
    return RunContext(
        project_root=root,
        base_dir=normalize_path(root / config.base_dir),
        resolve_extensions=tuple(config.resolve_extensions),
        source_extensions=tuple(config.source_extensions),
        aliases={
            prefix: normalize_path(root / target)
            for prefix, target in config.aliases.items()
        },
        exclude=tuple(config.exclude),
    )
