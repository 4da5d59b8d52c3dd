"""Settings: optional blockmacro.yaml, then .env / environment (BLOCKMACRO_*) on top."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from blockmacro.errors import ConfigError

DEFAULT_CONFIG_FILE = "blockmacro.yaml"
DEFAULT_TIMEOUT = 5.0

ENV_AGENT_URL = "BLOCKMACRO_AGENT_URL"
ENV_TIMEOUT = "BLOCKMACRO_TIMEOUT"
ENV_LOG_LEVEL = "BLOCKMACRO_LOG_LEVEL"


@dataclass
class Settings:
    agent_url: Optional[str] = None  # None -> transport.DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Build settings. An explicit ``config_path`` must exist; the cwd default is optional."""
    load_dotenv(Path.cwd() / ".env")
    settings = Settings()

    path = config_path or Path.cwd() / DEFAULT_CONFIG_FILE
    if config_path is not None and not config_path.exists():
        raise ConfigError("Config file not found", path=str(config_path))
    if path.exists():
        _apply(settings, _read_yaml(path), source=str(path))

    env = {
        "agent_url": os.environ.get(ENV_AGENT_URL),
        "timeout": os.environ.get(ENV_TIMEOUT),
        "log_level": os.environ.get(ENV_LOG_LEVEL),
    }
    _apply(settings, {k: v for k, v in env.items() if v}, source="environment")
    return settings


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", path=str(path)) from e
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping", path=str(path))
    return data


def _apply(settings: Settings, values: dict[str, Any], source: str) -> None:
    if values.get("agent_url") is not None:
        settings.agent_url = str(values["agent_url"])
    if values.get("timeout") is not None:
        try:
            timeout = float(values["timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"timeout must be a number, got {values['timeout']!r}", path=source) from e
        if timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {timeout}", path=source)
        settings.timeout = timeout
    if values.get("log_level") is not None:
        level = str(values["log_level"]).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"Unknown log level {values['log_level']!r}", path=source)
        settings.log_level = level
