"""
Configuration Module

Architectural Intent:
- Centralized configuration loading from a JSON file
- Provides typed access to all tidemark settings
- Falls back to sensible defaults when config file is absent
- Environment variables override file-based config

Design Decisions:
- Config is a frozen dataclass for immutability after load
- Nested config sections map to sub-dataclasses
- The service name is resolved here (flag first, then config); the core never
  reads configuration sources itself
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import dataclasses
import json
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "tidemark.json"
TOP_LEVEL_KEYS = ("log_level", "json_logs")


class ServiceNameMissingError(ValueError):
    def __init__(self) -> None:
        super().__init__(
            "Required service name missing. Please specify the service name in "
            f"{DEFAULT_CONFIG_FILE}, or pass it as an argument with `--name`"
        )


@dataclass(frozen=True)
class ApiConfig:
    """Remote deployments API configuration."""
    base_url: str = "https://api.cloudflare.com/client/v4"
    account_id: str = ""
    token: str = ""
    timeout_seconds: int = 30


@dataclass(frozen=True)
class ServiceConfig:
    """The service whose deployments are managed."""
    name: str = ""


@dataclass(frozen=True)
class DisplayConfig:
    """Presentation settings."""
    history_limit: int = 10


@dataclass(frozen=True)
class TidemarkConfig:
    """Root configuration for the tidemark application."""
    api: ApiConfig = field(default_factory=ApiConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    log_level: str = "WARNING"
    json_logs: bool = False


def _env_override(data: dict, prefix: str = "TIDEMARK") -> dict:
    """Override config values with environment variables.

    Environment variables follow the pattern TIDEMARK_SECTION_KEY.
    For example: TIDEMARK_API_TOKEN=..., TIDEMARK_SERVICE_NAME=my-worker.
    Top-level keys use their full name: TIDEMARK_LOG_LEVEL=DEBUG.
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        remainder = key[len(prefix) + 1:].lower()
        if remainder in TOP_LEVEL_KEYS:
            data[remainder] = value
            continue
        parts = remainder.split("_", 1)
        if len(parts) == 2:
            section, field_name = parts
            if not isinstance(data.get(section), dict):
                data[section] = {}
            data[section][field_name] = value
        elif len(parts) == 1:
            data[parts[0]] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns empty dict on failure."""
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a JSON object", path)
        return {}
    return data


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


def _build_sub_config(cls, data: dict):
    """Build a sub-config dataclass from a dict, ignoring unknown keys."""
    if not isinstance(data, dict):
        return cls()
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    # Convert string numbers to int/bool
    for f in dataclasses.fields(cls):
        if f.name in filtered and isinstance(filtered[f.name], str):
            if f.type == "int":
                filtered[f.name] = int(filtered[f.name])
            elif f.type == "bool":
                filtered[f.name] = _to_bool(filtered[f.name])

    return cls(**filtered)


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "TIDEMARK",
) -> TidemarkConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (TIDEMARK_SECTION_KEY)
    2. Config file values
    3. Defaults

    Args:
        path: Path to config file (JSON). Defaults to tidemark.json in CWD.
        env_prefix: Environment variable prefix. Defaults to TIDEMARK.
    """
    config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)
    data = _parse_config_file(config_path)
    data = _env_override(data, env_prefix)

    return TidemarkConfig(
        api=_build_sub_config(ApiConfig, data.get("api", {})),
        service=_build_sub_config(ServiceConfig, data.get("service", {})),
        display=_build_sub_config(DisplayConfig, data.get("display", {})),
        log_level=str(data.get("log_level", "WARNING")),
        json_logs=_to_bool(data.get("json_logs", False)),
    )


def resolve_service_name(flag_value: Optional[str], config: TidemarkConfig) -> str:
    """Pick the service name from the --name flag, falling back to config."""
    name = (flag_value or config.service.name or "").strip()
    if not name:
        raise ServiceNameMissingError()
    return name
