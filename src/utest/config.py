from __future__ import annotations

from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_CONFIG = "utest.yaml"


class RunConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    modules: list[str]
    contexts: list[str] = []
    junit: str | None = None
    debug_log: str = ".utest/debug.log"
    fill: str = "."
    padding: int = 3

    @field_validator("modules")
    @classmethod
    def modules_must_not_be_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("modules must not be empty")
        return v

    @field_validator("modules", "junit", "debug_log", mode="before")
    @classmethod
    def expand_environment(cls, v):
        """Expand ${VAR} references, failing on unset variables without defaults."""

        def _expand(value):
            if not isinstance(value, str):
                return value
            try:
                return expandvars(value, nounset=True)
            except Exception as e:
                raise ValueError(f"cannot expand '{value}': {e}") from e

        if isinstance(v, list):
            return [_expand(item) for item in v]
        return _expand(v)

    @field_validator("fill")
    @classmethod
    def fill_is_single_character(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"fill must be a single character, got {v!r}")
        return v

    @field_validator("padding")
    @classmethod
    def padding_is_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("padding must be at least 1")
        return v


def load_config(path: Path) -> RunConfig:
    """Load and validate a run config from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"config file must contain a mapping: {path}")

    config = RunConfig(**raw)

    # Resolve relative file paths relative to config file location
    config.modules = [
        str((config_dir / m).resolve())
        if m.endswith(".py") and not Path(m).is_absolute()
        else m
        for m in config.modules
    ]
    if config.junit is not None and not Path(config.junit).is_absolute():
        config.junit = str((config_dir / config.junit).resolve())
    if not Path(config.debug_log).is_absolute():
        config.debug_log = str((config_dir / config.debug_log).resolve())

    return config
