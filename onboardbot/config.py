"""Configuration loading for onboardbot (.onboardbot.yml plus environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .mcp import McpServer, default_servers, server_from_mapping
from .prompting.constants import (
    DEFAULT_MODEL,
    MAX_DISCUSSIONS_TO_FETCH,
    MAX_FILES_TO_ANALYZE,
    MAX_ISSUES_TO_FETCH,
    MAX_PRS_TO_FETCH,
)

CONFIG_FILENAME = ".onboardbot.yml"
DEFAULT_OUTPUT_DIR = "onboarding-guides"
DEFAULT_REQUEST_TIMEOUT = 300.0


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LimitsConfig:
    """How many items each repository query asks for."""

    max_files: int = MAX_FILES_TO_ANALYZE
    max_prs: int = MAX_PRS_TO_FETCH
    max_issues: int = MAX_ISSUES_TO_FETCH
    max_discussions: int = MAX_DISCUSSIONS_TO_FETCH


@dataclass
class OnboardConfig:
    """Effective settings for one onboardbot run."""

    root: Path
    model: str = DEFAULT_MODEL
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    mcp_servers: Dict[str, McpServer] = field(default_factory=default_servers)
    log_file: Optional[Path] = None


def load_config(
    config_path: Path | None = None, *, env: Mapping[str, str] | None = None
) -> OnboardConfig:
    """Load configuration from disk and apply environment overrides.

    Precedence is environment over file over defaults; the CLI applies its own
    flags on top of the returned object.
    """
    env = os.environ if env is None else env
    config_file = _resolve_config_path(config_path or Path.cwd())
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    config = OnboardConfig(root=root, mcp_servers=default_servers(env))
    config.output_dir = root / DEFAULT_OUTPUT_DIR

    model = _as_str(data.get("model"))
    if model:
        config.model = model
    output_dir = _as_str(data.get("output_dir"))
    if output_dir:
        config.output_dir = root / output_dir
    if "request_timeout" in data:
        config.request_timeout = _as_timeout(data.get("request_timeout"), "request_timeout")
    log_file = _as_str(data.get("log_file"))
    if log_file:
        config.log_file = root / log_file

    limits_data = _as_dict(data.get("limits"))
    for name in ("max_files", "max_prs", "max_issues", "max_discussions"):
        if name in limits_data:
            value = _as_int(limits_data.get(name))
            if value is None or value <= 0:
                raise ConfigError(f"limits.{name} must be a positive integer")
            setattr(config.limits, name, value)

    for name, server_data in _as_dict(data.get("mcp_servers")).items():
        if not isinstance(server_data, dict):
            raise ConfigError(f"mcp_servers.{name} must be a mapping")
        try:
            config.mcp_servers[str(name)] = server_from_mapping(str(name), server_data)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    env_model = env.get("ONBOARDBOT_MODEL")
    if env_model:
        config.model = env_model
    env_output = env.get("OUTPUT_DIR")
    if env_output:
        config.output_dir = Path(env_output).expanduser()
    env_timeout = env.get("ONBOARDBOT_REQUEST_TIMEOUT")
    if env_timeout:
        config.request_timeout = _as_timeout(env_timeout, "ONBOARDBOT_REQUEST_TIMEOUT")

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_timeout(value: Any, name: str) -> Optional[float]:
    """Parse a timeout in seconds; zero or null disables it."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number of seconds")
    try:
        seconds = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number of seconds") from exc
    if seconds < 0:
        raise ConfigError(f"{name} must not be negative")
    return seconds or None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "LimitsConfig",
    "OnboardConfig",
    "load_config",
]
