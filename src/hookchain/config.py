"""Configuration loading from YAML files and environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigError


def _load_dotenv() -> None:
    """Load a .env file from the current directory if present (no dependency)."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()
            # Don't override existing env vars
            if key not in os.environ:
                os.environ[key] = value


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _check_filters(data: object) -> dict[str, dict[str, list[str]]]:
    """Validate the ``filters`` section: owner -> operation -> [paths]."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("'filters' must be a mapping of owner -> operations")
    result: dict[str, dict[str, list[str]]] = {}
    for owner, ops in data.items():
        if not isinstance(ops, dict):
            raise ConfigError(f"filters for {owner!r} must be a mapping of operation -> list")
        result[str(owner)] = {}
        for op, paths in ops.items():
            if isinstance(paths, str):
                paths = [paths]
            if not isinstance(paths, list):
                raise ConfigError(f"filters for {owner}.{op} must be a list of import paths")
            result[str(owner)][str(op)] = [str(p) for p in paths]
    return result


@dataclass
class HookConfig:
    log_level: str = "INFO"
    extensions: list[str] = field(default_factory=list)
    filters: dict[str, dict[str, list[str]]] = field(default_factory=dict)

    @classmethod
    def load(
        cls,
        config_path: str | Path | None = None,
        *,
        log_level: str | None = None,
        extensions: list[str] | None = None,
    ) -> HookConfig:
        """Load config from YAML file, then overlay env vars, then explicit args."""
        data: dict = {}

        # 0. Load .env file if present (before reading env vars)
        _load_dotenv()

        # 1. YAML file (optional); HOOKCHAIN_CONFIG names one when no path is given
        config_path = config_path or os.environ.get("HOOKCHAIN_CONFIG")
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    try:
                        data = yaml.safe_load(f) or {}
                    except yaml.YAMLError as e:
                        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
                if not isinstance(data, dict):
                    raise ConfigError(f"{path} must contain a mapping at the top level")

        exts = data.get("extensions", [])
        if isinstance(exts, str):
            exts = _split(exts)

        config = cls(
            log_level=str(data.get("log_level", cls.log_level)).upper(),
            extensions=list(exts),
            filters=_check_filters(data.get("filters")),
        )

        # 2. Environment variables
        if env_level := os.environ.get("HOOKCHAIN_LOG_LEVEL"):
            config.log_level = env_level.upper()
        if env_exts := os.environ.get("HOOKCHAIN_EXTENSIONS"):
            config.extensions = _split(env_exts)

        # 3. Explicit arguments (highest priority)
        if log_level is not None:
            config.log_level = log_level.upper()
        if extensions is not None:
            config.extensions = extensions

        return config
